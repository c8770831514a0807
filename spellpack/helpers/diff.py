from typing import Dict, List, Mapping, Optional


Rows = Mapping[str, Mapping[str, str]]


def _changed_fields(before: Mapping[str, str], after: Mapping[str, str]) -> List[str]:
    fields = [k for k in after if before.get(k) != after[k]]
    fields.extend(k for k in before if k not in after)
    return fields


def report_record_deltas(
    before_rows: Rows,
    after_rows: Rows,
    *,
    label: str = "Record",
    max_list: int = 50,
    ignore_fields: Optional[List[str]] = None,
    printer=print,
) -> Dict[str, List[str]]:
    """
    Compare two decoded record sets keyed by entry id, printing a delta summary
    in the stage-report format (`Record deltas: added=.., removed=.., changed=..`).
    `Using` and `i` hold record positions, which shift whenever anything is
    added, so they are ignored by default.
    Returns the added / removed / changed id lists.
    """
    ignored = set(ignore_fields if ignore_fields is not None else ["Using", "i"])
    added = sorted(k for k in after_rows if k not in before_rows)
    removed = sorted(k for k in before_rows if k not in after_rows)
    changed: List[str] = []
    changed_fields: Dict[str, List[str]] = {}
    for key in sorted(set(before_rows) & set(after_rows)):
        fields = [
            f for f in _changed_fields(before_rows[key], after_rows[key]) if f not in ignored
        ]
        if fields:
            changed.append(key)
            changed_fields[key] = fields

    deltas = {"added": added, "removed": removed, "changed": changed}
    total_diff = len(added) + len(removed) + len(changed)
    if not before_rows:
        printer(f"No previous {label.lower()}s to compare against.")
        return deltas
    if not total_diff:
        printer("No record content changes detected.")
        return deltas

    printer(
        f"{label} deltas: added="
        f"{len(added)}, removed={len(removed)}, changed={len(changed)}"
    )
    if total_diff <= max_list:
        if added:
            printer("  Added:")
            for n in added:
                printer(f"    - {n}")
        if removed:
            printer("  Removed:")
            for n in removed:
                printer(f"    - {n}")
        if changed:
            printer("  Changed:")
            for n in changed:
                printer(f"    - {n} ({', '.join(changed_fields[n])})")
    return deltas
