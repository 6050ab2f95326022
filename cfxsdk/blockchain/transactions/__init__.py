from .transaction import (UnsignedTransaction, SignedTransaction, VALID_RECOVERY_IDS, INTEGER_FIELD_BITS,
                          DEFAULTABLE_FIELDS)
from .transaction_serializer import (TransactionSerializer, UNSIGNED_FIELDS, SIGNED_FIELDS,
                                     encode_unsigned, decode_unsigned, encode_signed, decode_signed)
from .transaction_record import TransactionRecord, TransactionStatus
from .transaction_builder import TransactionBuilder
from .transaction_verifier import TransactionVerifier
