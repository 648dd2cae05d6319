from chains.dto import ChainConfig
from errors import ConfigurationError


class ChainRegistry:
    def __init__(self, chains: list[ChainConfig]):
        self._chains: dict[int, ChainConfig] = {}
        for cfg in chains:
            if cfg.chain_id in self._chains:
                raise ConfigurationError(f"Duplicate chain id {cfg.chain_id}")
            self._chains[cfg.chain_id] = cfg

    def get(self, chain_id: int) -> ChainConfig | None:
        return self._chains.get(chain_id)

    def get_by_name(self, name: str) -> ChainConfig | None:
        name = name.lower()
        for cfg in self._chains.values():
            if cfg.name == name:
                return cfg
        return None

    def resolve(self, selector: str) -> ChainConfig:
        """Look a chain up by numeric id or by name."""
        cfg = self.get(int(selector)) if selector.isdigit() else self.get_by_name(selector)

        if cfg is None:
            known = ", ".join(c.name for c in self.list())
            raise ConfigurationError(f"Unconfigured chain '{selector}' (known: {known})")

        return cfg

    def list(self) -> list[ChainConfig]:
        return list(self._chains.values())
