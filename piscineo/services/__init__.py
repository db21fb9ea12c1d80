"""Rendering services"""
