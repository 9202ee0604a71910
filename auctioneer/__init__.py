"""
Auctioneer

Auction mechanism engines:
- Descending-price (Dutch) auction with timed price decay
- Sealed-bid second-price (Vickrey) auction with commit-reveal
- Advisory fraud scoring of bid events
"""

__version__ = "0.1.0"
