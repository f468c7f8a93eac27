"""
RepeatWeaver v0.1.0

Configuration schema for RepeatWeaver.

Defines all available configuration parameters with defaults and validation.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Dict, Any, Optional, List
from pathlib import Path
import copy
import yaml


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Multiplicity Inference
    # ========================================================================
    'multiplicity': {
        'balance': True,  # Correct coverage estimates with the flow LP
        'edge_cost': 1.0,  # Objective weight per unit of edge multiplicity
        'slack_penalty': 1000.0,  # Objective weight per unit of source/sink flow
        'rank_tolerance': 1e-9,  # Zero threshold for the row independence test

        'solver': {
            'backend': 'scipy',
            'method': 'highs-ds',  # 'highs', 'highs-ds' (dual simplex), 'highs-ipm'
        },
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'write_gfa': True,
        'write_tsv': True,
        'write_report': True,

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,  # e.g. 'repeatweaver.log'
        },
    },
}

VALID_TEMPLATES = ['default', 'estimate-only', 'debug']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        ConfigValidationError: If the file is not valid YAML or not a mapping
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in config file {config_path}: {e}")

        if user_config is None:
            return config
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {config_path} must contain a mapping, got {type(user_config).__name__}"
            )

        # Deep merge user config into defaults
        config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'estimate-only', 'debug')
    """
    if template not in VALID_TEMPLATES:
        raise ValueError(f"Unknown template '{template}', expected one of {VALID_TEMPLATES}")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'estimate-only':
        config['multiplicity']['balance'] = False

    elif template == 'debug':
        config['output']['logging']['level'] = 'DEBUG'
        config['output']['logging']['log_file'] = 'repeatweaver.log'

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _section(parent: Dict[str, Any], key: str, path: str, errors: List[str]) -> Optional[Dict[str, Any]]:
    """Return a nested config section, or record an error if it is not a mapping."""
    value = parent.get(key, {})
    if not isinstance(value, dict):
        errors.append(f"{path} must be a mapping, got {type(value).__name__}")
        return None
    return value


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    from ..repeat_graph.lp_solver import SOLVER_BACKENDS, ScipyLinprogSolver

    errors = []
    mult = _section(config, 'multiplicity', 'multiplicity', errors)

    if mult is not None:
        # Validate objective weights
        weight_errors = []
        for key in ('edge_cost', 'slack_penalty'):
            value = mult.get(key)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                weight_errors.append(f"multiplicity.{key} must be a positive number, got {value!r}")
        errors.extend(weight_errors)

        edge_cost = mult.get('edge_cost')
        slack_penalty = mult.get('slack_penalty')
        if not weight_errors and slack_penalty <= edge_cost:
            errors.append(
                f"multiplicity.slack_penalty ({slack_penalty}) must exceed "
                f"multiplicity.edge_cost ({edge_cost})"
            )

        tolerance = mult.get('rank_tolerance')
        if not isinstance(tolerance, (int, float)) or isinstance(tolerance, bool) or not 0 < tolerance < 1:
            errors.append(f"multiplicity.rank_tolerance must be in (0, 1), got {tolerance!r}")

        # Validate solver
        solver = _section(mult, 'solver', 'multiplicity.solver', errors)
        if solver is not None:
            backend = solver.get('backend')
            if not isinstance(backend, str) or backend not in SOLVER_BACKENDS:
                errors.append(f"Unknown LP backend: {backend} (available: {', '.join(sorted(SOLVER_BACKENDS))})")
            elif backend == 'scipy' and solver.get('method') not in ScipyLinprogSolver.VALID_METHODS:
                errors.append(f"Invalid solver method: {solver.get('method')}")

    # Validate logging
    output = _section(config, 'output', 'output', errors)
    log_cfg = _section(output, 'logging', 'output.logging', errors) if output is not None else None
    if log_cfg is not None:
        level = log_cfg.get('level')
        if level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid logging level: {level}")

    return errors

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
