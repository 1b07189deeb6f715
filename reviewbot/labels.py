from collections.abc import (
    Iterable,
    Set,
)

from reviewbot.config import BotConfig

APPROVED = "approved"
LGTM = "lgtm"

# the gitee platform limits the maximum length of a label to 20.
LABEL_LEN_LIMIT = 20

MSG_MISSING_LABELS = "PR does not have these lables: {labels}"
MSG_INVALID_LABELS = "PR should remove these labels: {labels}"
MSG_NOT_ENOUGH_LGTM_LABEL = "PR needs {required} lgtm labels and now gets {got}"


def gen_lgtm_label(commenter: str, lgtm_counts_required: int) -> str:
    if lgtm_counts_required <= 1:
        return LGTM

    label = f"{LGTM}-{commenter.lower()}"
    return label[:LABEL_LEN_LIMIT]


def get_lgtm_labels(labels: Iterable[str]) -> list[str]:
    return sorted(label for label in set(labels) if label.startswith(LGTM))


def check_labels(labels: Set[str], cfg: BotConfig) -> list[str]:
    """
    Returns the reasons why the label set does not satisfy the merge
    policy. An empty list means the labels allow the merge.
    """
    reasons = []

    needs = {APPROVED, *cfg.labels_for_merge}

    required = cfg.lgtm_counts_required
    if required == 1:
        needs.add(LGTM)
    else:
        got = len(get_lgtm_labels(labels))
        if got < required:
            reasons.append(
                MSG_NOT_ENOUGH_LGTM_LABEL.format(required=required, got=got)
            )

    if missing := needs - labels:
        reasons.append(MSG_MISSING_LABELS.format(labels=", ".join(sorted(missing))))

    if invalid := set(cfg.missing_labels_for_merge) & labels:
        reasons.append(MSG_INVALID_LABELS.format(labels=", ".join(sorted(invalid))))

    return reasons
