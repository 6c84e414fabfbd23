from pathlib import Path

import wallet_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(wallet_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

# compiled contract artifacts (truffle-style build output)
CONTRACT_BUILD_DIR = PROJECT_ROOT / "build" / "contracts"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

#
# Contracts
#

SIMPLE_STORAGE = "SimpleStorage"
MULTISIG_WALLET = "MultiSignatureWallet"

# constructor parameter names of MultiSignatureWallet
WALLET_OWNERS_PARAMETER = "_owners"
WALLET_REQUIRED_PARAMETER = "_required"

#
# Block explorers
#

ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"

# chain id -> (api subdomain suffix, explorer domain)
EXPLORER_API_NETWORKS = {
    1: ("", "etherscan.io"),
    11155111: ("-sepolia", "etherscan.io"),
    17000: ("-holesky", "etherscan.io"),
    137: ("", "polygonscan.com"),
    80002: ("-amoy", "polygonscan.com"),
}
