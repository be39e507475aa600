"""Board games app package.

Catalog of lendable board games with a finite stock, and the stock
protocol used by reservations to hold and release copies.
"""
