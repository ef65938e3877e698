"""Configuration module"""
from .config import BaseConfig, NominaConfig, SurrealConfig
