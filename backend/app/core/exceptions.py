"""Domain exceptions raised by services and translated by the API layer."""


class PortfolioTrackerError(Exception):
    """Base class for domain errors."""


class PortfolioNotFound(PortfolioTrackerError):
    def __init__(self, portfolio_id):
        super().__init__(f"Portfolio with ID {portfolio_id} not found")
        self.portfolio_id = portfolio_id


class HoldingNotFound(PortfolioTrackerError):
    def __init__(self, holding_id):
        super().__init__(f"Asset with ID {holding_id} not found")
        self.holding_id = holding_id


class OwnershipMismatch(PortfolioTrackerError):
    """A holding was addressed through a portfolio it does not belong to."""

    def __init__(self, portfolio_id, holding_id):
        super().__init__("Asset does not belong to this portfolio")
        self.portfolio_id = portfolio_id
        self.holding_id = holding_id


class QuoteUnavailable(PortfolioTrackerError):
    def __init__(self, symbol: str, reason: str = "no data"):
        super().__init__(f"Quote unavailable for {symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class InvalidHorizon(PortfolioTrackerError, ValueError):
    def __init__(self, horizon_days: int):
        super().__init__(f"Simulation horizon must be positive, got {horizon_days}")
        self.horizon_days = horizon_days
