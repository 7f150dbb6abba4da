"""
Pairwise algorithm selection.

Binary set operations are implemented as a registry of rules
``(left type, right type) -> algorithm``. A rule declared commutative also
matches the swapped operand order, so each algorithm is written once.

For a pair of operands, every matching rule is scored by how far each
operand's class is from the rule's type in the MRO (0 = exact class). A rule
whose score is beaten component-wise by another matching rule is discarded.
If exactly one rule survives it is used; otherwise the pair is ambiguous and
a more specific disambiguation rule has to be registered.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Tuple

from ..core.errors import AmbiguousDispatch, UnsupportedOperation

logger = logging.getLogger(__name__)


class Rule(NamedTuple):
    left: type
    right: type
    func: Callable
    commutative: bool


def _distance(cls: type, target: type) -> int:
    return cls.__mro__.index(target)


def _dominates(s: Tuple[int, int], t: Tuple[int, int]) -> bool:
    return s[0] <= t[0] and s[1] <= t[1] and s != t


class DispatchRegistry:
    """
    Registry of pairwise algorithms for one binary operation.

    Parameters
    ----------
    name : str
        Name of the operation, used in error messages.
    """

    def __init__(self, name: str):
        self.name = name
        self._rules: List[Rule] = []
        self._cache: Dict[Tuple[type, type], Tuple[Callable, bool]] = {}

    def register(self, left: type, right: type, commutative: bool = True):
        """
        Decorator registering an algorithm for ``(left, right)`` operands.

        Parameters
        ----------
        left, right : type
            Operand classes (abstract classes match all subclasses).
        commutative : bool
            If True (default), the rule also applies to ``(right, left)``
            operands, which are then swapped before the call.
        """
        def decorator(func):
            self._rules.append(Rule(left, right, func, commutative))
            self._cache.clear()
            return func
        return decorator

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def _match(self, rule: Rule, tx: type, ty: type):
        best = None
        if issubclass(tx, rule.left) and issubclass(ty, rule.right):
            best = ((_distance(tx, rule.left), _distance(ty, rule.right)), False)
        if rule.commutative and issubclass(tx, rule.right) and issubclass(ty, rule.left):
            score = (_distance(tx, rule.right), _distance(ty, rule.left))
            # the direct order wins ties
            if best is None or sum(score) < sum(best[0]):
                best = (score, True)
        return best

    def resolve(self, tx: type, ty: type) -> Tuple[Callable, bool]:
        """
        Find the algorithm for operand classes ``tx`` and ``ty``.

        Returns
        -------
        (callable, bool)
            The algorithm and whether the operands must be swapped.

        Raises
        ------
        UnsupportedOperation
            If no rule matches.
        AmbiguousDispatch
            If several rules match equally well.
        """
        key = (tx, ty)
        if key in self._cache:
            return self._cache[key]

        candidates = []
        for rule in self._rules:
            matched = self._match(rule, tx, ty)
            if matched is not None:
                candidates.append((rule, matched[0], matched[1]))

        if not candidates:
            raise UnsupportedOperation(self.name, tx.__name__, ty.__name__)

        best = [c for c in candidates
                if not any(_dominates(other[1], c[1]) for other in candidates)]
        # the same algorithm registered under several signatures
        best = list({(c[0].func, c[2]): c for c in best}.values())
        if len(best) > 1:
            names = ", ".join(c[0].func.__name__ for c in best)
            raise AmbiguousDispatch(self.name, tx.__name__, ty.__name__,
                                    reason=f"ambiguous between {names}")

        rule, _, swapped = best[0]
        logger.debug("%s(%s, %s) -> %s%s", self.name, tx.__name__, ty.__name__,
                     rule.func.__name__, " (swapped)" if swapped else "")
        self._cache[key] = (rule.func, swapped)
        return self._cache[key]

    def __call__(self, x, y, **options):
        func, swapped = self.resolve(type(x), type(y))
        if swapped:
            return func(y, x, **options)
        return func(x, y, **options)
