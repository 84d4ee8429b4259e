"""HTTP API for the coach debate"""
