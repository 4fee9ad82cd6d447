from .model_interface import ranked_feature_importance, check_model_interface
from .visualization import (
    create_results_directory,
    save_experiment_config,
    plot_feature_importance,
    plot_training_loss
)

__all__ = [
    'ranked_feature_importance',
    'check_model_interface',
    'create_results_directory',
    'save_experiment_config',
    'plot_feature_importance',
    'plot_training_loss'
]
