import pytest

from hdsk.config import DEFAULT_SCHEMA
from hdsk.lib.hashes import Blake2bAdapter, Blake3Adapter, HmacAdapter

# 32 zero bytes, hex encoded
ZERO_SECRET_HEX = "00" * 32

# Reference vectors for secret = 32 zero bytes under DEFAULT_SCHEMA.
# Regenerate per adapter; vectors from different adapters never match.
SHA256_VECTORS = {
    "m": {
        "key": "1346a9b481d8f95cfe3f1a427eaa0d8cef91966844a7a3bad3d8b1b4feda9c44",
        "chain_code": "735fc82a26e87717a57d257706a146b071b707eac21a71af0987b8552a613d43",
        "fingerprint": "826e8b08e442b053c17fe04bdb434a2b",
    },
    "m/42": {
        "key": "c49d57bf370608c793aa7cb9fb2318df2c2d6f4d42c217535590df7309f50a7a",
        "chain_code": "d10dd9e9be960ff9b02fc34f9774924318e49bbaa6f52bc5677d6ac3758c9d84",
        "fingerprint": "f86de431adc32d8936e681a2c24ca92f",
    },
    "m/42/0/1/0": {
        "key": "7bc626147a8441fd808a42dbfb889a083f1cbd3065b5921e1a28a53db0d3781f",
        "chain_code": "ebb670f3c1129e0d168a08a9863d6bf683567dfa26f4562efd286ddb10d37151",
        "fingerprint": "cfa16c41882773d9b42b56fbaae3850f",
    },
    "m/42/0/1/1": {
        "key": "4b5fdd55957768e3c3fde5e610a22da99f12a408f4dcbb570ddb61cf5d33e08c",
        "chain_code": "0f4b96bdc44d36d7a5d19539df20592c369072be6925e3792c2620aab2fc6952",
        "fingerprint": "c630b157f6b4e2d24d0c0661c61bb6f6",
    },
}

BLAKE2B_VECTORS = {
    "m": {
        "key": "8833732ec420ac788a5ff8585729b4a9d4bea4d4377795dd25c94bd64fb2aa88",
        "chain_code": "91057869d83386e9ba856b084dd60a39f74f0b8153d66471f5f3279acce4b7fe",
        "fingerprint": "9991ad3259ae32ccf9d8227e4da7a109",
    },
    "m/42/0/1/0": {
        "key": "b514c03d8b5f672899181fab568213c5e9be1c172643626d517b90d9b8564793",
        "chain_code": "09c46e741868f8b7f920c68104c9364b9f005cf85762e4faf8e23c07c8fe8eff",
        "fingerprint": "bcf09ea643efa0fdbe0811ab8840b806",
    },
}


@pytest.fixture
def sha256():
    """The reference HMAC-SHA256 adapter."""
    return HmacAdapter("sha256")


@pytest.fixture
def blake2b():
    return Blake2bAdapter()


@pytest.fixture(
    params=[
        HmacAdapter("sha256"),
        HmacAdapter("sha3_512"),
        Blake2bAdapter(),
        Blake3Adapter(),
    ],
    ids=lambda h: h.name,
)
def adapter(request):
    """Every adapter, for properties that must hold regardless of hash."""
    return request.param


@pytest.fixture
def zero_secret():
    return bytes(32)


@pytest.fixture
def default_schema_text():
    return DEFAULT_SCHEMA


@pytest.fixture
def sha256_vectors():
    return SHA256_VECTORS


@pytest.fixture
def blake2b_vectors():
    return BLAKE2B_VECTORS
