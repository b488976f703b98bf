"""Kitchen API service packages"""
