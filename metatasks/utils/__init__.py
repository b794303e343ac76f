"""Logging, configuration and error types"""
