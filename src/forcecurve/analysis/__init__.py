"""Derivative, extremum and feature detection"""
