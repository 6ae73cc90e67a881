"""Transformers from Riot match payloads to match ORM rows.

Match details identify participants in two halves: ``participants`` carries
the per-game stats keyed by an in-match ``participantId`` and
``participantIdentities`` maps that id to the account behind it.
"""

from typing import Dict, List

from summoner_sync.core.riot_api.models import MatchDTO, MatchReferenceDTO, PlayerDTO
from summoner_sync.features.summoners.orm_models import SummonerORM
from .orm_models import MatchORM, SummonerMatchORM


def reference_to_match(reference: MatchReferenceDTO) -> MatchORM:
    """Match metadata row from a match list entry."""
    return MatchORM(
        id=reference.game_id,
        timestamp=reference.timestamp,
        season=reference.season,
        queue=reference.queue,
    )


def identities_by_participant(match: MatchDTO) -> Dict[int, PlayerDTO]:
    """Map participantId to player identity, dropping anonymous slots."""
    return {
        identity.participant_id: identity.player
        for identity in match.participant_identities
        if identity.player is not None and identity.player.summoner_id
    }


def match_to_summoner_stubs(match: MatchDTO) -> List[SummonerORM]:
    """Identity-only summoner rows for every identified participant."""
    return [
        SummonerORM(
            id=player.summoner_id,
            account_id=player.account_id,
            name=player.summoner_name,
            profile_icon_id=player.profile_icon,
        )
        for player in identities_by_participant(match).values()
    ]


def match_to_participations(match: MatchDTO) -> List[SummonerMatchORM]:
    """One participation row per participant with a known identity."""
    identities = identities_by_participant(match)

    participations = []
    for participant in match.participants:
        player = identities.get(participant.participant_id)
        if player is None:
            continue

        stats = participant.stats
        participations.append(
            SummonerMatchORM(
                game_id=match.game_id,
                summoner_id=player.summoner_id,
                champion_id=participant.champion_id,
                kills=stats.kills,
                deaths=stats.deaths,
                assists=stats.assists,
                wards_placed=stats.wards_placed,
                gold_earned=stats.gold_earned,
                win=stats.win,
                role=participant.timeline.role,
            )
        )

    return participations
