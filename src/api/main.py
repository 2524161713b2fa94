"""FastAPI app exposing the organ tree simulation."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from organtree import (
    PLANT_PROFILES,
    Organism,
    SimulationConfig,
    build_organism,
    prune_organ,
    run_simulation,
    simulate_step,
)
from organtree.serialization import delta_to_dict, organ_to_dict, organism_to_dict
from organtree.simulation import find_organ

app = FastAPI(title="Organ Tree Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ResetRequest(BaseModel):
    profile: str = Field(default="taproot", description="Name of a registered plant profile.")
    seed: Optional[int] = Field(default=None, description="Seed of the organism's random generator.")
    nan_policy: str = Field(default="propagate", pattern="^(propagate|zero)$")


class StepRequest(BaseModel):
    dt: float = Field(default=1.0, ge=0.0)
    verbose: bool = False


class SimulationRequest(BaseModel):
    days: float = Field(default=30.0, gt=0.0, le=3650.0)
    dt: float = Field(default=1.0, gt=0.0)


class PruneRequest(BaseModel):
    organ_id: int


def _build_organism(request: ResetRequest | None) -> Organism:
    request = request or ResetRequest()
    try:
        return build_organism(request.profile, seed=request.seed, nan_policy=request.nan_policy)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


CURRENT_ORGANISM = _build_organism(None)


@app.get("/profiles")
def list_profiles() -> dict[str, object]:
    return {"profiles": {name: profile.description for name, profile in PLANT_PROFILES.items()}}


@app.get("/state")
def get_state() -> dict[str, object]:
    return {"organism": organism_to_dict(CURRENT_ORGANISM)}


@app.get("/delta")
def get_delta() -> dict[str, object]:
    return {"delta": delta_to_dict(CURRENT_ORGANISM)}


@app.get("/summed/{name}")
def get_summed(name: str, otype: str = "any") -> dict[str, object]:
    try:
        value = CURRENT_ORGANISM.get_summed(name, otype)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"name": name, "organ_type": otype, "value": None if value != value else value}


@app.post("/reset")
def reset_organism(request: ResetRequest | None = None) -> dict[str, object]:
    global CURRENT_ORGANISM
    CURRENT_ORGANISM = _build_organism(request)
    return {"organism": organism_to_dict(CURRENT_ORGANISM)}


@app.post("/step")
def step_simulation(request: StepRequest) -> dict[str, object]:
    result = simulate_step(CURRENT_ORGANISM, request.dt, request.verbose)
    return {
        "result": {
            "simtime": result.simtime,
            "new_nodes": [list(node) for node in result.new_nodes],
            "new_segments": [list(segment) for segment in result.new_segments],
            "new_organs": [organ_to_dict(organ) for organ in result.new_organs],
            "updated_node_indices": result.updated_node_indices,
        },
        "organism": organism_to_dict(CURRENT_ORGANISM),
    }


@app.post("/simulate")
def simulate(request: SimulationRequest) -> dict[str, object]:
    config = SimulationConfig(dt=request.dt, days=request.days, nan_policy=CURRENT_ORGANISM.nan_policy)
    new_nodes = 0
    new_organs = 0
    for result in run_simulation(CURRENT_ORGANISM, config):
        new_nodes += len(result.new_nodes)
        new_organs += len(result.new_organs)
    return {
        "result": {"simtime": CURRENT_ORGANISM.simtime, "new_nodes": new_nodes, "new_organs": new_organs},
        "organism": organism_to_dict(CURRENT_ORGANISM),
    }


@app.post("/prune")
def prune(request: PruneRequest) -> dict[str, object]:
    try:
        target = find_organ(CURRENT_ORGANISM, request.organ_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Organ not found") from exc
    prune_organ(CURRENT_ORGANISM, target)
    return {"organism": organism_to_dict(CURRENT_ORGANISM)}
