"""Validation functions for entities written to storage."""

from label_sim.models import Project, Release


def validate_project(project: Project) -> tuple[list[str], list[str]]:
    """Validate a project and return errors and warnings.

    Args:
        project: Project to validate.

    Returns:
        Tuple of (errors, warnings) where:
        - errors: List of validation errors that should prevent saving
        - warnings: List of validation warnings (save allowed)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not project.title.strip():
        errors.append("title must be a non-empty string")

    if project.is_recording:
        if project.song_count < 1:
            errors.append("recording projects need song_count >= 1")
        if project.songs_created > project.song_count:
            errors.append(
                f"songs_created ({project.songs_created}) exceeds "
                f"song_count ({project.song_count})"
            )
    else:
        if project.cities < 1:
            errors.append("tours need at least one city")
        if project.cities_played > project.cities:
            errors.append(
                f"cities_played ({project.cities_played}) exceeds cities ({project.cities})"
            )
        if project.song_count:
            warnings.append("song_count is ignored for tours")

    if project.total_cost == 0:
        warnings.append("project has no budget")

    return errors, warnings


def validate_release(release: Release) -> tuple[list[str], list[str]]:
    """Validate a release and return errors and warnings.

    Args:
        release: Release to validate.

    Returns:
        Tuple of (errors, warnings).
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not release.title.strip():
        errors.append("title must be a non-empty string")

    track_numbers = [track.track_number for track in release.tracks]
    if len(set(track_numbers)) != len(track_numbers):
        errors.append("track numbers must be unique")

    song_ids = [track.song_id for track in release.tracks]
    if len(set(song_ids)) != len(song_ids):
        errors.append("a song can only appear once per release")

    if not release.tracks:
        warnings.append("release has no tracks")

    lead = release.lead_single
    if lead is not None:
        if lead.song_id not in song_ids:
            errors.append(f"lead single {lead.song_id} is not a track of this release")
        if lead.release_turn >= release.release_turn:
            errors.append("lead single must release before the main release")
        if any(amount < 0 for amount in lead.budget.values()):
            errors.append("lead single budget entries must be non-negative")

    if any(amount < 0 for amount in release.marketing_breakdown.values()):
        errors.append("marketing budget entries must be non-negative")

    return errors, warnings
