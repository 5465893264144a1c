"""
Composition layer: neurons, layers and MLPs over scalar Values, plus a
gradient-descent trainer.
"""

from .layers import Module, Neuron, Layer, MLP, as_values
from .trainer import MLPTrainer, TrainConfig

__all__ = ['Module', 'Neuron', 'Layer', 'MLP', 'as_values',
           'MLPTrainer', 'TrainConfig']
