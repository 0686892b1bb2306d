from typing import Any, Dict, Mapping


def build_update_expression(fields: Mapping[str, Any]) -> Dict[str, Any]:
    # placeholders #champ / :champ pour éviter les mots réservés DynamoDB ("name", ...)
    assignments = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    for key, value in fields.items():
        assignments.append(f"#{key} = :{key}")
        names[f"#{key}"] = key
        values[f":{key}"] = value

    expression = "SET"
    if assignments:
        expression += " " + ", ".join(assignments)

    return {
        "UpdateExpression": expression,
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }
