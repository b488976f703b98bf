"""Shared infrastructure for the kitchen API"""
