"""
Payout deductions for tools and materials a washer still holds.
"""
from typing import Dict, Iterable

# Consumables are deducted as materials; everything else counts as a tool
MATERIAL_TOOL_TYPES = ("material", "supply")


def outstanding_value(tool) -> float:
    return (tool.replacement_cost or 0.0) * (tool.quantity or 0)


def calculate_deductions(tools: Iterable) -> Dict[str, float]:
    """Split the value of unreturned assignments into material and tool deductions."""
    materials = 0.0
    equipment = 0.0
    for tool in tools:
        if tool.is_returned:
            continue
        if (tool.tool_type or "").lower() in MATERIAL_TOOL_TYPES:
            materials += outstanding_value(tool)
        else:
            equipment += outstanding_value(tool)
    return {
        "materialDeductions": materials,
        "toolDeductions": equipment,
        "totalDeductions": materials + equipment,
    }
