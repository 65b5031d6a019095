"""JSON, Excel and plot outputs"""
