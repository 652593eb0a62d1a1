"""Outbound clients"""
