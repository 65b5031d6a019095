"""Sample loading, stroke partitioning and simplification"""
