from . import access, models, schemas


def tournament_to_record_values(tournament: schemas.Tournament) -> dict[str, object]:
    payload = tournament.model_dump(mode="json")
    return {
        "id": payload["id"],
        "name": payload["name"],
        "stage": payload["stage"],
        "owner_id": payload["owner_id"],
        "invite_code": payload["invite_code"],
        "collaborators": payload["collaborators"],
        "groups": payload["groups"],
        "teams": payload["teams"],
        "matches": payload["matches"],
    }


def record_to_tournament(record: models.TournamentRecord) -> schemas.Tournament:
    return schemas.Tournament.model_validate(
        {
            "id": record.id,
            "name": record.name,
            "stage": record.stage,
            "owner_id": record.owner_id,
            "invite_code": record.invite_code,
            "collaborators": record.collaborators or [],
            "groups": record.groups or [],
            "teams": record.teams or [],
            "matches": record.matches or [],
        }
    )


def tournament_to_summary(tournament: schemas.Tournament, user_id: str) -> schemas.TournamentSummary | None:
    role = access.role_of(user_id, tournament)
    if role is None:
        return None

    return schemas.TournamentSummary(
        id=tournament.id,
        name=tournament.name,
        stage=tournament.stage,
        owner_id=tournament.owner_id,
        role=role,
        team_count=len(tournament.teams),
        match_count=len(tournament.matches),
    )
