"""Geometry and signal processing helpers"""
