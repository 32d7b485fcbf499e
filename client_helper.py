import hashlib
import logging
import secrets

logger = logging.getLogger(__name__)

# ---- Chain-constant parameters & helpers (mirror contract) ----

MAX_UINT128 = 2**128 - 1

CONTRACT_NAME = "con_zk_token"

def sha3_hex(s: str) -> str:
    # Matches Xian env semantics for non-hex input; every tagged string starts with "XZKT"
    return hashlib.sha3_256(s.encode("utf-8")).hexdigest()

def domain_hash(*parts) -> str:
    # Length-prefixed, same as the contract
    return sha3_hex("XZKT:v1|" + "|".join(str(len(str(x))) + ":" + str(x) for x in parts))

def random_secret() -> str:
    return secrets.token_hex(32)

def derive_identity(secret: str) -> str:
    """Shielded identifier for a secret. Opaque to the ledger."""
    if not secret:
        raise ValueError("Secret must be non-empty")
    return sha3_hex("XZKT:identity|" + secret)

def check_amount(amount: int):
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValueError("Amount must be an integer")
    if amount < 0 or amount > MAX_UINT128:
        raise ValueError("Amount outside uint128 domain")

def check_call(ids, amount: int, nonce: int):
    for account_id in ids:
        if not account_id:
            raise ValueError("Identity must be non-empty")
    check_amount(amount)
    if nonce < 1:
        raise ValueError("Nonce starts at 1")

# ---- Statements --------------------------------------------------------------

def transfer_statement(caller_id: str, recipient_id: str, amount: int, nonce: int,
                       contract_name: str = CONTRACT_NAME) -> str:
    return domain_hash(contract_name, "transfer", caller_id, recipient_id, amount, nonce)

def approve_statement(caller_id: str, spender_id: str, amount: int, nonce: int,
                      contract_name: str = CONTRACT_NAME) -> str:
    return domain_hash(contract_name, "approve", caller_id, spender_id, amount, nonce)

def transfer_from_statement(spender_id: str, owner_id: str, recipient_id: str, amount: int,
                            nonce: int, contract_name: str = CONTRACT_NAME) -> str:
    return domain_hash(contract_name, "transfer_from", spender_id, owner_id, recipient_id, amount, nonce)

def stub_prove(statement: str) -> str:
    # Only con_stub_verifier accepts these
    return sha3_hex("XZKT:stub-proof|" + statement)

# ---- High-level builders -----------------------------------------------------

def build_transfer(caller_id: str,
                   recipient_id: str,
                   amount: int,
                   next_nonce: int = 1,
                   prover=stub_prove,
                   contract_name: str = CONTRACT_NAME):
    """
    Returns kwargs for contract.transfer():
        (caller_id, recipient_id, amount, nonce, proof)
    """
    check_call((caller_id, recipient_id), amount, next_nonce)
    statement = transfer_statement(caller_id, recipient_id, amount, next_nonce, contract_name)
    logger.debug("transfer plan nonce=%s statement=%s", next_nonce, statement)

    return {
        'caller_id': caller_id,
        'recipient_id': recipient_id,
        'amount': amount,
        'nonce': next_nonce,
        'proof': prover(statement)
    }

def build_approve(caller_id: str,
                  spender_id: str,
                  amount: int,
                  next_nonce: int = 1,
                  prover=stub_prove,
                  contract_name: str = CONTRACT_NAME):
    """
    Returns kwargs for contract.approve():
        (caller_id, spender_id, amount, nonce, proof)
    The contract replaces any existing allowance with `amount`.
    """
    check_call((caller_id, spender_id), amount, next_nonce)
    statement = approve_statement(caller_id, spender_id, amount, next_nonce, contract_name)
    logger.debug("approve plan nonce=%s statement=%s", next_nonce, statement)

    return {
        'caller_id': caller_id,
        'spender_id': spender_id,
        'amount': amount,
        'nonce': next_nonce,
        'proof': prover(statement)
    }

def build_transfer_from(spender_id: str,
                        owner_id: str,
                        recipient_id: str,
                        amount: int,
                        next_nonce: int = 1,
                        prover=stub_prove,
                        contract_name: str = CONTRACT_NAME):
    """
    Returns kwargs for contract.transfer_from():
        (spender_id, owner_id, recipient_id, amount, nonce, proof)
    The nonce belongs to the spender.
    """
    check_call((spender_id, owner_id, recipient_id), amount, next_nonce)
    statement = transfer_from_statement(spender_id, owner_id, recipient_id, amount,
                                        next_nonce, contract_name)
    logger.debug("transfer_from plan nonce=%s statement=%s", next_nonce, statement)

    return {
        'spender_id': spender_id,
        'owner_id': owner_id,
        'recipient_id': recipient_id,
        'amount': amount,
        'nonce': next_nonce,
        'proof': prover(statement)
    }

# ---- Convenience: wallet-side state tracker (optional) ----------------------

class ShieldedAccount:
    """
    Optional local helper holding a secret and its shielded identity.
    Tracks the last committed nonce; call confirm() once a planned call lands.
    """
    def __init__(self, secret: str = None, nonce: int = 0, prover=stub_prove,
                 contract_name: str = CONTRACT_NAME):
        self.secret = secret or random_secret()
        self.identity = derive_identity(self.secret)
        self.nonce = nonce
        self.prover = prover
        self.contract_name = contract_name

    def plan_transfer(self, recipient_id: str, amount: int):
        return build_transfer(self.identity, recipient_id, amount, self.nonce + 1,
                              self.prover, self.contract_name)

    def plan_approve(self, spender_id: str, amount: int):
        return build_approve(self.identity, spender_id, amount, self.nonce + 1,
                             self.prover, self.contract_name)

    def plan_transfer_from(self, owner_id: str, recipient_id: str, amount: int):
        return build_transfer_from(self.identity, owner_id, recipient_id, amount,
                                   self.nonce + 1, self.prover, self.contract_name)

    def confirm(self, plan):
        if plan['nonce'] != self.nonce + 1:
            raise ValueError("Plan does not follow the current nonce")
        self.nonce = plan['nonce']
        return self.nonce
