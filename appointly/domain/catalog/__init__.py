"""Catalog domain - categories and the services staff members offer"""
