"""Dot editor - palette-indexed pixel art editor"""
