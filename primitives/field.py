"""BN254 scalar field GF(r).

Uses galois library for all field arithmetic. FF is the field type; every
column value, challenge and polynomial coefficient in the protocol lives here.

The field is constructed with its known multiplicative generator so galois
never has to factor r - 1 to find one.
"""

import galois

from py_ecc.optimized_bn128 import curve_order

# --- Field Construction ---

BN254_SCALAR_PRIME = curve_order

MULTIPLICATIVE_GENERATOR = 5

# r - 1 = 2^28 * t with t odd
TWO_ADICITY = 28

FF = galois.GF(BN254_SCALAR_PRIME, primitive_element=MULTIPLICATIVE_GENERATOR, verify=False)
"""Scalar field GF(r) of the BN254 curve."""

# Coset shift used to separate permutation columns: column j lives on DELTA^j * H
DELTA = MULTIPLICATIVE_GENERATOR

# --- Type Aliases ---
FFPoly = FF  # Array of field elements (column values over the domain)


def is_canonical(value) -> bool:
    """True if value is an integer already in [0, r)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value < BN254_SCALAR_PRIME


def get_omega(n_bits: int) -> int:
    """Return primitive 2^n_bits-th root of unity."""
    if not 0 <= n_bits <= TWO_ADICITY:
        raise ValueError(f"n_bits must be in [0, {TWO_ADICITY}], got {n_bits}")
    return pow(MULTIPLICATIVE_GENERATOR, (BN254_SCALAR_PRIME - 1) >> n_bits, BN254_SCALAR_PRIME)


def random_element(rng) -> FF:
    """Uniform field element drawn from rng (anything with randrange)."""
    return FF(rng.randrange(BN254_SCALAR_PRIME))


# --- Montgomery Batch Inversion ---

def batch_inverse(values):
    """Montgomery batch inversion for a galois array.

    Converts N field inversions into 3N-3 multiplications + 1 inversion.

    Args:
        values: FF array to invert (must all be non-zero)

    Returns:
        FF array where result[i] = values[i]^(-1)

    Raises:
        ZeroDivisionError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values
    if n == 1:
        return values ** -1

    field_type = type(values)

    # Forward pass: compute prefix products
    cumprods = field_type.Zeros(n)
    cumprods[0] = values[0]
    for i in range(1, n):
        cumprods[i] = cumprods[i - 1] * values[i]

    inv_total = cumprods[n - 1] ** -1

    # Backward pass: extract individual inverses
    results = field_type.Zeros(n)
    z = inv_total
    for i in range(n - 1, 0, -1):
        results[i] = z * cumprods[i - 1]
        z = z * values[i]
    results[0] = z

    return results
