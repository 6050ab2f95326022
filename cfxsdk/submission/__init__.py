from .poll_policy import PollPolicy
from .transaction_submission import TransactionSubmission, REJECTED_REASON, DROPPED_REASON, LOOKUP_FAILED_REASON
from .transaction_sender import TransactionSender
