"""
planbox.rules
~~~~~~~~~~~~~

Conditional business rules that slow a machine down (and change its
staffing) for particular job parameters.

A rule is a flat chain of conditions joined by AND/OR, folded strictly
left to right. When several rules match, the most restrictive one
governs: lowest speed modifier first, then highest priority.

Basic usage::

    from planbox.rules import MachineRule, evaluate_rules

    rule = MachineRule.from_dict({
        "name": "Large envelopes",
        "priority": 1,
        "conditions": [
            {"parameter": "paper_size", "operator": "equals", "value": "10x13", "logic": "OR"},
            {"parameter": "pockets", "operator": "greater_than", "value": 6},
        ],
        "outputs": {"speed_modifier": 80, "people_required": 2},
    })
    result = evaluate_rules([rule], base_speed=5000, parameters={"paper_size": "10x13"})
    result.calculated_speed    # 4000
    result.people_required     # 2

Public API
----------
evaluate_condition, evaluate_conditions    Test conditions against parameters.
find_matching_rules                        Active, in-scope rules that match.
select_most_restrictive_rule               Tie-break among matching rules.
evaluate_rules, evaluate_rules_for_machine Effective speed and staffing.
format_condition, format_conditions        Audit display strings.
"""

from planbox.rules.evaluator import (
    evaluate_condition,
    evaluate_conditions,
    evaluate_rules,
    evaluate_rules_for_machine,
    find_matching_rules,
    format_condition,
    format_conditions,
    select_most_restrictive_rule,
)
from planbox.rules.models import (
    LogicOperator,
    MachineRule,
    RuleCondition,
    RuleEvaluation,
    RuleOperator,
    RuleOutputs,
)

__all__ = [
    "LogicOperator",
    "MachineRule",
    "RuleCondition",
    "RuleEvaluation",
    "RuleOperator",
    "RuleOutputs",
    "evaluate_condition",
    "evaluate_conditions",
    "evaluate_rules",
    "evaluate_rules_for_machine",
    "find_matching_rules",
    "format_condition",
    "format_conditions",
    "select_most_restrictive_rule",
]
