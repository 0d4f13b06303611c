"""Pre-trade risk controls."""

from .risk_gate import RiskCheck, RiskGateResult, check_risk_gate

__all__ = ["RiskCheck", "RiskGateResult", "check_risk_gate"]
