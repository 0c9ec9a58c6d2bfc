from ember.evaluation.evaluator import evaluate, evaluate0
from ember.evaluation.apply import apply, apply_without_eval

__all__ = ["evaluate", "evaluate0", "apply", "apply_without_eval"]
