"""
StockApp
Copyright (c) 2025

Local account login and a small product stock dashboard.
"""
