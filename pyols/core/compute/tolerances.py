"""
Tolerance tiers for numerical validation.

Defines precision expectations for the two CPU solve paths:
- QR (reference): residual error of order eps * cond(X)
- Normal equations: error of order eps * cond(X)^2, since X'X squares the
  condition number

Backends record the tier that applies to each fit in Result.info; the
singularity threshold is shared by both rank checks.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# QR reference on well-conditioned data
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision via QR',
)

# Normal equations on well-conditioned data
CPU_FP64_NORMAL_EQUATIONS = ToleranceTier(
    rtol=1e-8,
    atol=1e-10,
    name='cpu_fp64_normal_equations',
    description='CPU double precision via (X\'X)^-1 X\'y',
)

# Any CPU path on ill-conditioned problems (cond > 1e4)
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

# Reciprocal condition number below which X'X is treated as singular.
# At cond(X'X) = 1e13 fewer than three significant digits survive in
# float64, which is no longer a meaningful inverse.
SINGULAR_RCOND_THRESHOLD = 1e-13

# Condition number of the equilibrated X above which a fit is reported as
# ill-conditioned and compared against the loosest tier.
ILL_CONDITIONED_THRESHOLD = 1e4


def select_tolerance(
    backend_name: str,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select the tolerance tier for a backend and the conditioning of its problem."""
    if is_ill_conditioned:
        return CPU_FP64_ILL_CONDITIONED
    if 'normal' in backend_name:
        return CPU_FP64_NORMAL_EQUATIONS
    return CPU_FP64
