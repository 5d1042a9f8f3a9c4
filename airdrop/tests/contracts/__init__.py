"""Helper contracts deployed by the airdrop tests."""
