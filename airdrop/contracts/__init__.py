"""Deployable airdrop contracts. Each lives in ``<name>/contract.py`` next to its manifest."""
