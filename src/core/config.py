"""
Configuration management for the PHU IMNCI service
"""

import os
from pathlib import Path
from typing import Dict, Any, List

from dotenv import load_dotenv


# Base paths
BASE_DIR = Path(__file__).parent.parent.parent

load_dotenv(BASE_DIR / ".env")


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    """Main configuration class for the IMNCI service"""

    def __init__(self):
        # HTTP API Configuration
        self.api_config = {
            'title': 'PHU IMNCI API',
            'version': '1.0.0',
            'host': os.getenv('API_HOST', '0.0.0.0'),
            'port': int(os.getenv('API_PORT', '8000')),
            'cors_origins': _split_origins(
                os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000')
            ),
        }

        # Assessment workflow Configuration
        self.assessment_config = {
            'treatment_separator': '\n\n',  # between per-domain treatment texts
        }

        # Logging
        self.logging_config = {
            'level': os.getenv('LOG_LEVEL', 'INFO'),
            'format': '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        }

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get configuration for a named section"""
        config_map = {
            'api': self.api_config,
            'assessment': self.assessment_config,
            'logging': self.logging_config,
        }
        return config_map.get(section.lower(), {})

    def update_config(self, section: str, updates: Dict[str, Any]) -> None:
        """Update a configuration section"""
        if hasattr(self, f'{section}_config'):
            config = getattr(self, f'{section}_config')
            config.update(updates)
        else:
            raise ValueError(f"Unknown configuration section: {section}")


# Global configuration instance
config = Config()
