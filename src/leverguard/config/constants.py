"""
Centralized constant values for leverguard.

Percent values are expressed in percent units (0.5 = 0.5%), dollar values in USD.
"""

# Hard circuit breakers (override every other exit rule)
DEFAULT_ABSOLUTE_MAX_HOLD_SECONDS: int = 3600  # 60 minute hard hold limit
DEFAULT_ABSOLUTE_MAX_LOSS_DOLLARS: float = 25.0  # Max net loss per trade

# Trailing stop state machine
DEFAULT_BREAKEVEN_ACTIVATION_PCT: float = 0.35  # Gross move that arms the breakeven stop
DEFAULT_BREAKEVEN_BUFFER_PCT: float = 0.06  # Fixed fee-covering offset from entry
DEFAULT_TRAILING_ACTIVATION_PCT: float = 0.50  # Gross move that arms the trailing stop
DEFAULT_TRAILING_DISTANCE_PCT: float = 0.30  # Trail distance behind peak price

# Graduated time exits
DEFAULT_SWING_MIN_HOLD_SECONDS: int = 120  # No take-profit before 2 minutes
DEFAULT_SWING_PROFIT_SCALE_SECONDS: int = 300  # Accept min profit target after 5 minutes
DEFAULT_GENEROUS_PROFIT_SECONDS: int = 900  # Accept any green exit after 15 minutes
DEFAULT_CAPITAL_FREE_SECONDS: int = 1800
DEFAULT_CAPITAL_FREE_MAX_LOSS_DOLLARS: float = 5.0
DEFAULT_TIME_DECAY_SECONDS: int = 2700
DEFAULT_TIME_DECAY_MAX_LOSS_DOLLARS: float = 10.0

# Wrong-direction early cuts
DEFAULT_THESIS_WRONG_SECONDS: int = 180
DEFAULT_THESIS_WRONG_PCT: float = -0.30
DEFAULT_TREND_FAILED_SECONDS: int = 600
DEFAULT_TREND_FAILED_DOLLARS: float = -3.0

# Position sizing and targets
DEFAULT_LEVERAGE: float = 10.0
DEFAULT_STOP_LOSS_PCT: float = 4.95  # Momentum / swing initial stop
DEFAULT_TAKE_PROFIT_PCT: float = 3.43  # Momentum / swing target
DEFAULT_MR_STOP_LOSS_PCT: float = 0.30  # Mean reversion initial stop
DEFAULT_MR_TAKE_PROFIT_PCT: float = 0.20  # Mean reversion target
DEFAULT_MIN_PROFIT_DOLLARS: float = 5.0
DEFAULT_MAX_PROFIT_DOLLARS: float = 500.0
DEFAULT_MAX_TRADE_SECONDS: int = 43200  # Configured timeout, clamped by the hard limit
DEFAULT_MAX_OPEN_POSITIONS: int = 1

# Fees (percent per side)
FEE_MODE_TAKER = "taker"
FEE_MODE_MAKER = "maker"
DEFAULT_TAKER_FEE_PCT: float = 0.03
DEFAULT_MAKER_FEE_PCT: float = 0.0
DEFAULT_FEE_MODE: str = FEE_MODE_TAKER

# Pre-trade risk gate
DEFAULT_INITIAL_BALANCE: float = 2000.0
DEFAULT_MAX_TRADES_PER_HOUR: int = 2
DEFAULT_MAX_CONSECUTIVE_LOSSES: int = 4
DEFAULT_PAUSE_AFTER_LOSSES_MINUTES: float = 60.0
DEFAULT_MAX_DAILY_LOSS_DOLLARS: float = 300.0
DEFAULT_MAX_DAILY_LOSS_PERCENT: float = 15.0
DEFAULT_MIN_BALANCE_FRACTION: float = 0.5  # Block new trades below 50% of initial balance

# Risk gate look-back windows
RATE_LIMIT_WINDOW_SECONDS: int = 3600
DAILY_LOSS_WINDOW_SECONDS: int = 86400

# Ledger schema
POSITION_SCHEMA_VERSION: int = 1
