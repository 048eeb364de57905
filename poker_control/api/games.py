from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from poker_control.api.errors import api_error, domain_error
from poker_control.api.schemas import (
    AddPlayerRequest,
    AmountRequest,
    BuyInStatusRequest,
    ChipAuditResponse,
    DebtorResponse,
    GameStateResponse,
    PlayerSummaryResponse,
    RankingResponse,
    StartGameRequest,
    TotalsResponse,
)
from poker_control.config import config
from poker_control.domain import (
    DomainValidationError,
    GameState,
    compute_chip_audit,
    compute_debtors,
    compute_player_summary,
    compute_ranking,
    compute_settlement_totals,
    compute_totals,
)
from poker_control.runtime import get_game_service
from poker_control.service import GameService
from poker_control.services.report_service import ExportFailure, export_report, render_report

router = APIRouter(prefix="/game", tags=["game"])


def _run(command: Callable[[], GameState], **details) -> GameStateResponse:
    try:
        state = command()
    except DomainValidationError as exc:
        raise domain_error(exc, **details) from exc
    return GameStateResponse.from_state(state)


@router.get("", response_model=GameStateResponse, summary="Estado atual da partida")
def get_game(service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return GameStateResponse.from_state(service.state)


@router.post("/start", response_model=GameStateResponse, summary="Iniciar partida")
def start_game(payload: StartGameRequest, service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(lambda: service.start_game(payload.buy_in_amount), buy_in_amount=str(payload.buy_in_amount))


@router.post("/end", response_model=GameStateResponse, summary="Encerrar jogo e abrir registro de saida")
def end_game(service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(service.end_game)


@router.post("/resume", response_model=GameStateResponse, summary="Voltar do registro de saida para o jogo")
def resume_game(service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(service.resume_game)


@router.post("/finish", response_model=GameStateResponse, summary="Finalizar partida")
def finish_game(service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(service.finish_game)


@router.post("/reset", response_model=GameStateResponse, summary="Nova partida (apaga tudo)")
def reset_game(service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(service.reset_game)


@router.post(
    "/players",
    response_model=GameStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Adicionar jogador",
)
def add_player(payload: AddPlayerRequest, service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(lambda: service.add_player(payload.name))


@router.delete("/players/{player_id}", response_model=GameStateResponse, summary="Remover jogador")
def remove_player(player_id: str, service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(lambda: service.remove_player(player_id), player_id=player_id)


@router.put("/players/{player_id}/buy-in", response_model=GameStateResponse, summary="Status do buy-in")
def set_buy_in_status(
    player_id: str,
    payload: BuyInStatusRequest,
    service: GameService = Depends(get_game_service),
) -> GameStateResponse:
    return _run(lambda: service.set_buy_in_status(player_id, payload.status), player_id=player_id)


@router.post("/players/{player_id}/rebuys", response_model=GameStateResponse, summary="Registrar rebuy")
def add_rebuy(
    player_id: str,
    payload: AmountRequest,
    service: GameService = Depends(get_game_service),
) -> GameStateResponse:
    return _run(
        lambda: service.add_rebuy(player_id, payload.amount),
        player_id=player_id,
        amount=str(payload.amount),
    )


@router.delete(
    "/players/{player_id}/rebuys/{rebuy_id}",
    response_model=GameStateResponse,
    summary="Remover rebuy",
)
def remove_rebuy(player_id: str, rebuy_id: str, service: GameService = Depends(get_game_service)) -> GameStateResponse:
    return _run(lambda: service.remove_rebuy(player_id, rebuy_id), player_id=player_id, rebuy_id=rebuy_id)


@router.post(
    "/players/{player_id}/rebuys/{rebuy_id}/toggle",
    response_model=GameStateResponse,
    summary="Alternar status de pagamento do rebuy",
)
def toggle_rebuy_status(
    player_id: str,
    rebuy_id: str,
    service: GameService = Depends(get_game_service),
) -> GameStateResponse:
    return _run(lambda: service.toggle_rebuy_status(player_id, rebuy_id), player_id=player_id, rebuy_id=rebuy_id)


@router.put("/players/{player_id}/cashout", response_model=GameStateResponse, summary="Registrar valor de saida")
def submit_cashout(
    player_id: str,
    payload: AmountRequest,
    service: GameService = Depends(get_game_service),
) -> GameStateResponse:
    return _run(
        lambda: service.submit_cashout(player_id, payload.amount),
        player_id=player_id,
        amount=str(payload.amount),
    )


@router.get("/totals", response_model=TotalsResponse, summary="Totais do caixa")
def get_totals(service: GameService = Depends(get_game_service)) -> TotalsResponse:
    return TotalsResponse.from_totals(compute_totals(service.state))


@router.get("/debtors", response_model=list[DebtorResponse], summary="Jogadores com pagamento pendente")
def get_debtors(service: GameService = Depends(get_game_service)) -> list[DebtorResponse]:
    return [DebtorResponse.from_debtor(debtor) for debtor in compute_debtors(service.state)]


@router.get(
    "/players/{player_id}/summary",
    response_model=PlayerSummaryResponse,
    summary="Resumo financeiro do jogador",
)
def get_player_summary(player_id: str, service: GameService = Depends(get_game_service)) -> PlayerSummaryResponse:
    state = service.state
    player = state.get_player(player_id)
    if player is None or player.is_ghost:
        raise api_error(
            code="player_not_found",
            message=f"Jogador {player_id} nao encontrado",
            details={"player_id": player_id},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return PlayerSummaryResponse.from_summary(compute_player_summary(state, player))


@router.get("/ranking", response_model=RankingResponse, summary="Ranking final")
def get_ranking(service: GameService = Depends(get_game_service)) -> RankingResponse:
    state = service.state
    return RankingResponse.build(compute_ranking(state), compute_settlement_totals(state))


@router.get("/audit", response_model=ChipAuditResponse, summary="Conferencia de fichas")
def get_audit(service: GameService = Depends(get_game_service)) -> ChipAuditResponse:
    return ChipAuditResponse.from_audit(compute_chip_audit(service.state))


@router.get("/report", response_class=PlainTextResponse, summary="Relatorio em texto")
def get_report(service: GameService = Depends(get_game_service)) -> str:
    return render_report(service.state)


@router.post("/report/export", summary="Salvar relatorio em arquivo")
def save_report(service: GameService = Depends(get_game_service)) -> dict[str, str]:
    try:
        path = export_report(service.state, config.report_dir)
    except ExportFailure as exc:
        raise api_error(
            code="export_failed",
            message=str(exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from exc
    return {"path": str(path)}
