# backend/crewtrack/apps/compliance/requirements.py

from __future__ import annotations

from typing import Dict, Iterable, List

from ...utils.strings import locale_key
from .enums import RequirementGrouping
from .schemas import Requirement, RequirementGroup, RequirementItem, Track, Training


def group_requirements(
    requirements: Iterable[Requirement],
    trainings: Iterable[Training],
    tracks: Iterable[Track],
    by: RequirementGrouping = RequirementGrouping.TRAINING,
) -> List[RequirementGroup]:
    """
    Requirements grouped by training (items = tracks) or by track
    (items = trainings). Names missing from the lookups render as the id.
    """
    training_names = {t.id: t.name for t in trainings}
    track_names = {t.id: t.name for t in tracks}

    def _training_name(training_id: int) -> str:
        return training_names.get(training_id) or str(training_id)

    def _track_name(track_id: int) -> str:
        return track_names.get(track_id) or str(track_id)

    groups: Dict[int, RequirementGroup] = {}
    for req in requirements:
        if by == RequirementGrouping.TRAINING:
            group_id, group_name, item_name = req.training_id, _training_name(req.training_id), _track_name(req.track_id)
        else:
            group_id, group_name, item_name = req.track_id, _track_name(req.track_id), _training_name(req.training_id)

        group = groups.get(group_id)
        if group is None:
            group = RequirementGroup(id=group_id, name=group_name, items=[])
            groups[group_id] = group
        group.items.append(
            RequirementItem(
                id=req.id,
                track_id=req.track_id,
                training_id=req.training_id,
                active=req.active,
                name=item_name,
            )
        )

    for group in groups.values():
        group.items.sort(key=lambda item: locale_key(item.name))

    return sorted(groups.values(), key=lambda g: locale_key(g.name))
