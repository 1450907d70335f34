"""
Mining pool stats dashboard: poll, normalize and chart a MiningCore pool.
"""
