"""Tests for maze, strategy, run and comparison endpoints."""

import pytest
from httpx import AsyncClient


# Maze endpoints

@pytest.mark.asyncio
async def test_list_mazes(client: AsyncClient):
    """Test GET /v1/maze lists built-in and file mazes without walls."""
    response = await client.get("/v1/maze")
    assert response.status_code == 200
    data = response.json()
    names = [m["name"] for m in data["mazes"]]
    assert {"given", "surprise", "serpentine_5x5"} <= set(names)
    assert data["total"] == len(names)
    assert "walls" not in data["mazes"][0]


@pytest.mark.asyncio
async def test_get_maze(client: AsyncClient):
    """Test GET /v1/maze/{name} returns wall masks and dead ends."""
    response = await client.get("/v1/maze/given")
    assert response.status_code == 200
    data = response.json()
    assert data["size"] == 9
    assert len(data["walls"]) == 81
    assert data["dead_ends"] == [0, 5, 11, 19, 34, 45, 48, 64, 80]
    assert data["total_dead_ends"] == 9
    assert data["start_facing"] == "N"
    assert data["ascii"] is None


@pytest.mark.asyncio
async def test_get_maze_ascii(client: AsyncClient):
    response = await client.get("/v1/maze/serpentine_5x5", params={"ascii": True})
    assert response.status_code == 200
    assert len(response.json()["ascii"].splitlines()) == 11


@pytest.mark.asyncio
async def test_get_maze_not_found(client: AsyncClient):
    """Test GET /v1/maze/{name} with unknown maze."""
    response = await client.get("/v1/maze/nowhere")
    assert response.status_code == 404
    assert response.json()["detail"] == "Maze not found: nowhere"


# Strategy endpoints

@pytest.mark.asyncio
async def test_list_strategies(client: AsyncClient):
    response = await client.get("/v1/strategies")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 14
    interactive = {s["name"] for s in data["strategies"] if s["interactive"]}
    assert interactive == {"manual-input", "log-playback"}


@pytest.mark.asyncio
async def test_list_strategies_without_interactive(client: AsyncClient):
    response = await client.get("/v1/strategies", params={"include_interactive": False})
    assert response.status_code == 200
    assert response.json()["total"] == 12


# Run endpoints

@pytest.mark.asyncio
async def test_create_run(client: AsyncClient):
    """Test POST /v1/runs starts at the start pose."""
    response = await client.post(
        "/v1/runs",
        json={"strategy": "left-hand", "maze": "serpentine_5x5"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["run_id"].startswith("run_")
    assert data["status"] == "RUNNING"
    assert data["steps"] == 0
    assert data["max_steps"] == 80
    assert data["pose"] == {"position": 0, "facing": "E"}


@pytest.mark.asyncio
async def test_advance_run_to_exit(client: AsyncClient):
    """Test stepping a run until it exits, then advancing a finished run."""
    response = await client.post(
        "/v1/runs",
        json={"strategy": "left-hand", "maze": "serpentine_5x5"},
    )
    run_id = response.json()["run_id"]

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 10})
    assert response.status_code == 200
    data = response.json()
    assert len(data["frames"]) == 10
    assert data["frames"][0]["move"] == "FORWARD"
    assert data["run"]["steps"] == 10
    assert data["run"]["status"] == "RUNNING"

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 100})
    data = response.json()
    assert data["run"]["status"] == "EXITED"
    assert data["run"]["steps"] == 24
    assert len(data["frames"]) == 14

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 5})
    assert response.status_code == 200
    assert response.json()["frames"] == []


@pytest.mark.asyncio
async def test_create_run_with_inline_maze(client: AsyncClient, sample_maze_definition):
    response = await client.post(
        "/v1/runs",
        json={"strategy": "right-hand", "maze_definition": sample_maze_definition},
    )
    assert response.status_code == 201
    run_id = response.json()["run_id"]
    assert response.json()["maze"] == "inline-corridor"

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 5})
    data = response.json()
    assert data["run"]["status"] == "EXITED"
    assert data["run"]["steps"] == 2


@pytest.mark.asyncio
async def test_manual_input_run(client: AsyncClient, sample_maze_definition):
    response = await client.post(
        "/v1/runs",
        json={
            "strategy": "manual-input",
            "maze_definition": sample_maze_definition,
            "commands": "F,F",
        },
    )
    assert response.status_code == 201
    run_id = response.json()["run_id"]

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 5})
    assert response.json()["run"]["status"] == "EXITED"


@pytest.mark.asyncio
async def test_log_playback_run(client: AsyncClient, sample_maze_definition):
    response = await client.post(
        "/v1/runs",
        json={
            "strategy": "log-playback",
            "maze_definition": sample_maze_definition,
            "frames": [
                {"pos": 0, "facing": "E", "move": "FORWARD"},
                {"pos": 1, "facing": "E", "move": "FORWARD"},
            ],
        },
    )
    assert response.status_code == 201
    run_id = response.json()["run_id"]

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 5})
    assert response.json()["run"]["status"] == "EXITED"


@pytest.mark.asyncio
async def test_create_run_unknown_maze(client: AsyncClient):
    response = await client.post("/v1/runs", json={"strategy": "left-hand", "maze": "nowhere"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Maze not found: nowhere"


@pytest.mark.asyncio
async def test_create_run_unknown_strategy(client: AsyncClient):
    response = await client.post("/v1/runs", json={"strategy": "teleport", "maze": "given"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown strategy: teleport"


@pytest.mark.asyncio
async def test_create_run_rejects_unsupported_options(client: AsyncClient):
    response = await client.post(
        "/v1/runs",
        json={"strategy": "left-hand", "maze": "given", "seed": 3},
    )
    assert response.status_code == 400
    assert "does not accept" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_run_rejects_invalid_inline_maze(client: AsyncClient, sample_maze_definition):
    sample_maze_definition["start_pos"] = 9
    response = await client.post(
        "/v1/runs",
        json={"strategy": "left-hand", "maze_definition": sample_maze_definition},
    )
    assert response.status_code == 400
    assert "out of range" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_run_rejects_bad_wall_mask(client: AsyncClient, sample_maze_definition):
    sample_maze_definition["walls"][0] = 16
    response = await client.post(
        "/v1/runs",
        json={"strategy": "left-hand", "maze_definition": sample_maze_definition},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_run_needs_exactly_one_maze_source(
    client: AsyncClient, sample_maze_definition
):
    response = await client.post("/v1/runs", json={"strategy": "left-hand"})
    assert response.status_code == 422

    response = await client.post(
        "/v1/runs",
        json={
            "strategy": "left-hand",
            "maze": "given",
            "maze_definition": sample_maze_definition,
        },
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_run_with_frames(client: AsyncClient):
    response = await client.post("/v1/runs", json={"strategy": "tremaux", "maze": "given"})
    run_id = response.json()["run_id"]
    await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 3})

    response = await client.get(f"/v1/runs/{run_id}")
    assert response.status_code == 200
    assert response.json()["frames"] is None

    response = await client.get(f"/v1/runs/{run_id}", params={"frames": True})
    frames = response.json()["frames"]
    assert [f["step"] for f in frames] == [1, 2, 3]
    assert frames[0]["pos"] == 76


@pytest.mark.asyncio
async def test_advance_limits(client: AsyncClient):
    response = await client.post("/v1/runs", json={"strategy": "left-hand", "maze": "given"})
    run_id = response.json()["run_id"]

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 1001})
    assert response.status_code == 400
    assert response.json()["detail"] == "At most 1000 steps per request"

    response = await client.post(f"/v1/runs/{run_id}/advance", json={"steps": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_run_not_found(client: AsyncClient):
    response = await client.get("/v1/runs/run_missing")
    assert response.status_code == 404

    response = await client.post("/v1/runs/run_missing/advance", json={"steps": 1})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_run(client: AsyncClient):
    response = await client.post("/v1/runs", json={"strategy": "pledge", "maze": "given"})
    run_id = response.json()["run_id"]

    response = await client.delete(f"/v1/runs/{run_id}")
    assert response.status_code == 204

    response = await client.get(f"/v1/runs/{run_id}")
    assert response.status_code == 404

    response = await client.delete(f"/v1/runs/{run_id}")
    assert response.status_code == 404


# Comparison endpoints

@pytest.mark.asyncio
async def test_latest_comparison_before_any_run(client: AsyncClient):
    response = await client.get("/v1/comparison/latest")
    assert response.status_code == 404
    assert response.json()["detail"] == "No comparison has been run yet"


@pytest.mark.asyncio
async def test_run_comparison(client: AsyncClient):
    """Test POST /v1/comparison ranks the requested strategies."""
    response = await client.post(
        "/v1/comparison",
        json={"strategies": ["left-hand", "tremaux"], "mazes": ["serpentine_5x5", "given"]},
    )
    assert response.status_code == 200
    data = response.json()
    assert len(data["results"]) == 4
    assert [r["rank"] for r in data["rankings"]] == [1, 2]
    assert {r["strategy"] for r in data["rankings"]} == {"left-hand", "tremaux"}
    scores = [r["total_score"] for r in data["rankings"]]
    assert scores == sorted(scores, reverse=True)

    response = await client.get("/v1/comparison/latest")
    assert response.status_code == 200
    assert len(response.json()["results"]) == 4


@pytest.mark.asyncio
async def test_run_comparison_unknown_maze(client: AsyncClient):
    response = await client.post(
        "/v1/comparison",
        json={"strategies": ["left-hand"], "mazes": ["nowhere"]},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Maze not found: nowhere"


@pytest.mark.asyncio
async def test_run_comparison_unknown_strategy(client: AsyncClient):
    response = await client.post(
        "/v1/comparison",
        json={"strategies": ["teleport"], "mazes": ["given"]},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown strategy: teleport"
