from collections import OrderedDict
from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONFIGS_DIR = DEPLOYMENT_DIR / "configs"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
WASM_DIR = DEPLOYMENT_DIR.parent / "contracts"

CHAIN_CONFIG_FILENAME = "paloma_config.json"
FACTORY_CONFIG_FILENAME = "factory_config.json"
MULTI_HOP_CONFIG_FILENAME = "multi_hop_config.json"
GAUGES_CONFIG_FILENAME = "gauges_config.json"

RESULT_FILENAME = "result.json"

#
# Signer
#

MNEMONIC_ENVVAR = "MNEMONIC"
MIN_MNEMONIC_LENGTH = 48  # roughly 12 words

# first account of the Cosmos coin type; the deployer wallet is derived on this path
HD_PATH = "m/44'/118'/0'/0/0"

#
# Contracts
#

TOKEN = "token"
PAIR = "pair"
PAIR_STABLE = "pair-stable"
STAKE = "stake"
FACTORY = "factory"
MULTI_HOP = "multi-hop"
GAUGE_ORCHESTRATOR = "gauge-orchestrator"
GAUGE_ADAPTER = "gauge-adapter"
DAO_CORE = "dao-core"
PROPOSAL_SINGLE = "proposal-single"
CW4_STAKE = "cw4-stake"

WASM_FILENAMES = OrderedDict(
    [
        (TOKEN, "cw20_base.wasm"),
        (PAIR, "palomadex_pair.wasm"),
        (PAIR_STABLE, "palomadex_pair_lsd.wasm"),
        (STAKE, "palomadex_stake.wasm"),
        (FACTORY, "palomadex_factory.wasm"),
        (MULTI_HOP, "palomadex_multi_hop.wasm"),
        (GAUGE_ORCHESTRATOR, "gauge_orchestrator.wasm"),
        (GAUGE_ADAPTER, "gauge_adapter.wasm"),
        (DAO_CORE, "dao_dao_core.wasm"),
        (PROPOSAL_SINGLE, "dao_proposal_single.wasm"),
        # the DAO voting module is the palomadex stake contract, uploaded a second time
        (CW4_STAKE, "palomadex_stake.wasm"),
    ]
)

# uploaded before the factory is instantiated; the DAO binaries come later
DEX_CONTRACTS = [
    TOKEN,
    PAIR,
    PAIR_STABLE,
    STAKE,
    FACTORY,
    MULTI_HOP,
    GAUGE_ORCHESTRATOR,
    GAUGE_ADAPTER,
]
DAO_CONTRACTS = [DAO_CORE, PROPOSAL_SINGLE, CW4_STAKE]

#
# Gas limits
#

UPLOAD_GAS_LIMIT = 5_000_000
INSTANTIATE_GAS_LIMIT = 500_000
CREATE_PAIR_GAS_LIMIT = 1_500_000
DAO_CORE_GAS_LIMIT = 1_000_000
GAUGE_ADAPTER_GAS_LIMIT = 1_000_000
CREATE_GAUGE_GAS_LIMIT = 1_000_000

#
# Token & DAO
#

TOKEN_LABEL = "MyToken Contract"
TOKEN_NAME = "MyToken"
TOKEN_SYMBOL = "MTK"
TOKEN_DECIMALS = 6
TOKEN_INITIAL_BALANCE = "1000000000"

DAO_NAME = "My DAO"
DAO_DESCRIPTION = "Description of My DAO"
DAO_IMAGE_URL = "https://example.com/image.png"
DAO_CORE_LABEL = "DAO Core with Modules"
VOTING_MODULE_LABEL = "CW4 Stake Voting Module"
PROPOSAL_MODULE_LABEL = "Proposal Single Module"

ONE_DAY = 24 * 60 * 60
UNBONDING_PERIOD = ONE_DAY
MAX_VOTING_PERIOD = 7 * ONE_DAY
MIN_VOTING_PERIOD = ONE_DAY
TOKENS_PER_POWER = "1000000"
MIN_BOND = "1000000"
PROPOSAL_DEPOSIT = "1000"

#
# Client
#

# The client fails to decode the committed transaction when the node returns
# paloma-specific message types; the transaction itself has been applied.
TOLERATED_CLIENT_ERROR = "Can not find message descriptor by type_url"
