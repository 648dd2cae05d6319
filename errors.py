class PoolScanError(Exception):
    stage = "scan"

    def __init__(self, message: str, address: str | None = None):
        super().__init__(message)
        self.message = message
        self.address = address

    def __str__(self) -> str:
        if self.address:
            return f"[{self.stage}] {self.message} (address={self.address})"
        return f"[{self.stage}] {self.message}"


class ConfigurationError(PoolScanError):
    stage = "config"


class InvalidTokenError(PoolScanError):
    stage = "input"


class ChainReadError(PoolScanError):
    """Raised when a whole multicall round trip fails at the transport level."""

    def __init__(self, message: str, stage: str, address: str | None = None):
        super().__init__(message, address)
        self.stage = stage


class MetadataUnavailable(PoolScanError):
    stage = "metadata"


class DiscoveryPartialFailure(PoolScanError):
    """A single fee tier lookup failed. Never fatal, the tier is dropped."""

    stage = "discovery"

    def __init__(self, message: str, address: str | None = None, fee: int | None = None):
        super().__init__(message, address)
        self.fee = fee


class ReserveReadError(PoolScanError):
    stage = "reserves"


class PricingDecodeError(PoolScanError):
    stage = "pricing"


class OracleUnavailable(PoolScanError):
    stage = "oracle"
