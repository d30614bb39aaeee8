"""td_control: linear temporal-difference learning and control in JAX.

The package provides the pieces of a classic online reinforcement learning
stack: state geometry (dimensions and spaces), feature projections (basis
networks, uniform grids, tile coding), linear approximators over those
features, action-selection policies, and TD agents for prediction and
control. Approximator weights and traces are immutable chex dataclasses
updated by pure, JIT-compiled functions; agents own these states and replace
them step by step as they interact with a domain.

Double precision is enabled on import.

Examples
--------
```python
from td_control import (
    EpsilonGreedy, Partitioned, QSigma, RegularSpace, SerialExperiment,
    SparseLinear, UniformGrid, run,
)

space = RegularSpace([Partitioned(0.0, 10.0, 10), Partitioned(-1.0, 1.0, 8)])
q_func = SparseLinear(UniformGrid(space), n_outputs=3)
agent = QSigma(q_func, EpsilonGreedy(0.1), alpha=0.1, gamma=0.99, sigma=0.5)

episodes = run(SerialExperiment(agent, make_domain, step_limit=1000), n_episodes=200)
```

References
----------
- Reinforcement Learning: An Introduction (Sutton & Barto, 2018)
- Multi-step Reinforcement Learning: A Unifying Algorithm (De Asis et al., 2018)
- Off-Policy Actor-Critic (Degris, White & Sutton, 2012)
"""

import jax

jax.config.update("jax_enable_x64", True)

__version__ = "0.1.0"

# Agents
from td_control.agents import (  # noqa: E402
    TD,
    AccumulatingTrace,
    ActorCritic,
    ControlAgent,
    EligibilityTrace,
    OffPAC,
    PredictionAgent,
    QSigma,
    ReplacingTrace,
    SARSALambda,
    TDLambda,
)

# Core
from td_control.core import (  # noqa: E402
    Constant,
    Episode,
    ExponentialSchedule,
    FullObservation,
    LinearSchedule,
    LinearState,
    Observation,
    Parameter,
    TerminalObservation,
    TraceState,
    Transition,
    as_parameter,
)

# Domains
from td_control.domains import Domain  # noqa: E402

# Experiments
from td_control.experiment import (  # noqa: E402
    EpisodeLogger,
    Evaluation,
    ExperimentConfig,
    SerialExperiment,
    run,
    train_and_evaluate,
)

# Function approximation
from td_control.fa import (  # noqa: E402
    Approximator,
    BasisFunction,
    BasisNetwork,
    DenseLinear,
    Projection,
    RBFNetwork,
    SparseLinear,
    SparseProjection,
    SuttonTiles,
    TileCoding,
    TileHasher,
    UNHHasher,
    UniformGrid,
)

# Geometry
from td_control.geometry import (  # noqa: E402
    Continuous,
    Dimension,
    Discrete,
    Exponential,
    Gaussian,
    Kernel,
    NullSpace,
    PairSpace,
    Partitioned,
    RegularSpace,
    Space,
    Span,
    SpanKind,
    UnitarySpace,
    action_space,
)

# Policies
from td_control.policies import (  # noqa: E402
    Boltzmann,
    DifferentiablePolicy,
    EpsilonGreedy,
    Greedy,
    Policy,
    Random,
)

# Utilities
from td_control.utils import (  # noqa: E402
    compute_running_mean,
    episodes_to_dicts,
    summarise_episodes,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Constant",
    "Episode",
    "ExponentialSchedule",
    "FullObservation",
    "LinearSchedule",
    "LinearState",
    "Observation",
    "Parameter",
    "TerminalObservation",
    "TraceState",
    "Transition",
    "as_parameter",
    # Geometry
    "Continuous",
    "Dimension",
    "Discrete",
    "Exponential",
    "Gaussian",
    "Kernel",
    "NullSpace",
    "PairSpace",
    "Partitioned",
    "RegularSpace",
    "Space",
    "Span",
    "SpanKind",
    "UnitarySpace",
    "action_space",
    # Function approximation
    "Approximator",
    "BasisFunction",
    "BasisNetwork",
    "DenseLinear",
    "Projection",
    "RBFNetwork",
    "SparseLinear",
    "SparseProjection",
    "SuttonTiles",
    "TileCoding",
    "TileHasher",
    "UNHHasher",
    "UniformGrid",
    # Policies
    "Boltzmann",
    "DifferentiablePolicy",
    "EpsilonGreedy",
    "Greedy",
    "Policy",
    "Random",
    # Agents
    "AccumulatingTrace",
    "ActorCritic",
    "ControlAgent",
    "EligibilityTrace",
    "OffPAC",
    "PredictionAgent",
    "QSigma",
    "ReplacingTrace",
    "SARSALambda",
    "TD",
    "TDLambda",
    # Domains
    "Domain",
    # Experiments
    "EpisodeLogger",
    "Evaluation",
    "ExperimentConfig",
    "SerialExperiment",
    "run",
    "train_and_evaluate",
    # Utilities
    "compute_running_mean",
    "episodes_to_dicts",
    "summarise_episodes",
]
