"""Token discovery for Ethereum addresses."""
