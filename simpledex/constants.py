"""Protocol constants for SimpleDEX.

Centralizes token defaults and the fixed-point scales used by the pair math.
"""

# Fees and share percentages are expressed in basis points
BPS_DENOMINATOR = 10_000

# No fee by default; the quote is the bare constant-product formula
DEFAULT_FEE_BPS = 0

# Liquidity shares are parsed and displayed with token A's precision
SHARE_DECIMALS = 18

# Default tokens published by the deployment (name, symbol, decimals)
TOKEN_A_NAME = "MyToken"
TOKEN_A_SYMBOL = "MTK"
TOKEN_A_DECIMALS = 18

TOKEN_B_NAME = "SimpleUSDC"
TOKEN_B_SYMBOL = "sUSDC"
TOKEN_B_DECIMALS = 6

PAIR_NAME = "SimpleDEX"

# Whole tokens minted to the deployer for each token
DEFAULT_INITIAL_SUPPLY = 1_000_000

# Whole tokens the panels approve in one go, so later actions skip the approval step
DEFAULT_APPROVAL_TOKENS = 1_000_000

# Hardhat's first default account
DEFAULT_DEPLOYER = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"

# Display precision used by the panels
BALANCE_DISPLAY_PLACES = 4
QUOTE_DISPLAY_PLACES = 6
RATIO_DISPLAY_PLACES = 4
