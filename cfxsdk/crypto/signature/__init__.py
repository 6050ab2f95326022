from .signer import SignerBase, RecoverableSigner, sign_transaction
from .verifier import SignatureVerifierBase, RecoverableSignatureVerifier, recover_pubkey, recover_address

Signer = RecoverableSigner
SignVerifier = RecoverableSignatureVerifier
