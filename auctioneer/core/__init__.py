"""Auctioneer core: engines, events, risk scoring and configuration."""
