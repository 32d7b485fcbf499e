import hashlib
import importlib.util
from pathlib import Path

import contracting
import pytest
from contracting.client import ContractingClient
from contracting.compilation import whitelists

PROJECT_ROOT = Path(__file__).resolve().parents[1]
CONTRACT_PATH = PROJECT_ROOT / "con_zk_token.py"
VERIFIER_PATH = PROJECT_ROOT / "con_stub_verifier.py"
HELPER_PATH = PROJECT_ROOT / "client_helper.py"
SUBMISSION_PATH = (
    Path(contracting.__file__).resolve().parent / "contracts" / "submission.s.py"
)

GENESIS_SUPPLY = 1_000


@pytest.fixture(scope="session", autouse=True)
def enable_sha3_and_whitelist():
    whitelists.ALLOWED_BUILTINS.update({"hashlib"})

    if not hasattr(hashlib, "sha3"):
        def _sha3(data):
            if isinstance(data, str):
                data = data.encode("utf-8")
            return hashlib.sha3_256(data).hexdigest()

        setattr(hashlib, "sha3", _sha3)


@pytest.fixture(scope="session")
def helper_module():
    spec = importlib.util.spec_from_file_location("client_helper_tests", HELPER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def client():
    client = ContractingClient(signer="operator", metering=False)
    client.flush()
    client.set_submission_contract(str(SUBMISSION_PATH))
    return client


@pytest.fixture
def verifier(client):
    client.submit(VERIFIER_PATH.read_text(), name="con_stub_verifier", owner=None)
    return client.get_contract("con_stub_verifier")


@pytest.fixture
def contract(client, verifier):
    client.submit(
        CONTRACT_PATH.read_text(),
        name="con_zk_token",
        owner=None,
        constructor_args={
            "name": "Shielded Token",
            "symbol": "SHLD",
            "decimals": 8,
            "total_supply": GENESIS_SUPPLY,
            "genesis_id": "alice",
            "verifier": "con_stub_verifier",
        },
    )
    return client.get_contract("con_zk_token")
