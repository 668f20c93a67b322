"""
XOR equation systems, as produced by Simon's algorithm.

Each equation is the set of variables XORed together and equated to 0:
``{0, 2}`` stands for ``x0 ^ x2 = 0``. A solution is the list of variables
set to 1.

The system is first reduced to echelon form, equations left with a single
variable are solved by substitution and the remaining variables are brute
forced.
"""

from __future__ import annotations

from itertools import chain, combinations
from typing import AbstractSet, Iterable

# (variables, constant): x_a ^ x_b ^ ... ^ constant = 0
_Equation = tuple[frozenset[int], bool]


def _echelon_form(equations: Iterable[AbstractSet[int]]) -> list[frozenset[int]]:
    pending = [frozenset(equation) for equation in equations]
    variables = sorted(set(chain.from_iterable(pending)), reverse=True)

    result = []
    for variable in variables:
        pivot = next((equation for equation in pending if variable in equation), None)
        if pivot is None:
            continue
        pending.remove(pivot)
        result.append(pivot)
        pending = [equation ^ pivot if variable in equation else equation for equation in pending]

    return result


def _solves(equations: list[_Equation], activated: set[int]) -> bool:
    for variables, constant in equations:
        value = constant
        for variable in variables:
            value ^= variable in activated
        if value:
            return False
    return True


def _brute_force(equations: list[_Equation]) -> list[list[int]]:
    variables = sorted(set(chain.from_iterable(variables for variables, _ in equations)))
    solutions = []
    for size in range(len(variables) + 1):
        for candidate in combinations(variables, size):
            if _solves(equations, set(candidate)):
                solutions.append(list(candidate))
    return solutions


def _presimplify(equations: list[_Equation]) -> list[list[int]]:
    activated = []
    pending = list(equations)
    while True:
        single = next((equation for equation in pending if len(equation[0]) == 1), None)
        if single is None:
            break
        pending.remove(single)
        (variable,), constant = single
        if constant:
            activated.append(variable)
        pending = [
            (variables - {variable}, value ^ (constant and variable in variables))
            for variables, value in pending
        ]

    if not pending:
        return [sorted(activated)]
    return [sorted(solution + activated) for solution in _brute_force(pending)]


def find_activated_variables_in_equations(equations: AbstractSet[AbstractSet[int]]) -> list[list[int]]:
    """
    Every assignment of the variables that makes all ``equations`` XOR to 0.

    Parameters
    ----------
    equations : set of frozenset of int
        Variables of each equation.

    Returns
    -------
    list[list[int]]
        One sorted list of activated variables per solution. An empty system
        has no solutions.

    Examples
    --------
    >>> find_activated_variables_in_equations({frozenset({0, 1}), frozenset({1, 2})})
    [[], [0, 1, 2]]
    """
    reduced = _echelon_form(equations)
    if not reduced:
        return []
    return _presimplify([(equation, False) for equation in reduced])
