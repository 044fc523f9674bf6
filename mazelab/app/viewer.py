# mazelab/app/viewer.py
#!/usr/bin/env python3
"""
Maze Lab Viewer - generate a maze, edit it, watch a solver work through it.

- Keyboard:
    [SPACE]          -> run/pause
    [N]              -> single step
    [R]              -> reset the current run
    [G]              -> generate a new maze
    [K]              -> clear all walls (keeps start and end)
    [1]/[2]/[3]/[4]  -> generator: recursive / prim / kruskal / empty
    [A]/[D]/[B]/[F]/[I] -> algorithm: A* / Dijkstra / BFS / DFS / bidirectional
    [C]              -> compare all algorithms (batch, no animation)
    [W]/[S]/[E]/[X]  -> edit mode: wall / start / end / none (click the grid)
    [+]/[-]          -> steps/sec
    [Q]/[ESC]        -> quit

Config (env, overridden by CLI):
- MAZELAB_SIZE / --size=N      maze side, 10..50 (default 25)
- MAZELAB_GEN  / --gen=KIND    recursive | prim | kruskal | empty
- MAZELAB_SEED / --seed=N      seed for generation and DFS
"""

# --- bootstrap import path so `from mazelab...` works when run as a script ---
import sys, os, time, random
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

from typing import List, Tuple, Optional, Dict
import pygame

from mazelab.core.errors import MazeError
from mazelab.core.maze_gen import GENERATORS, build_maze
from mazelab.core.metrics import format_table, result_metrics, summarize
from mazelab.core.runner import ALGORITHM_INFO, ALGORITHM_ORDER, compare_all, make_algo, validate_endpoints
from mazelab.core.types import Grid, Coord

# ---------- Config resolution ----------
SIZE_MIN, SIZE_MAX, SIZE_DEFAULT = 10, 50, 25


def resolve_config(argv: Optional[List[str]] = None, env: Optional[Dict[str, str]] = None) -> Dict[str, object]:
    argv = sys.argv[1:] if argv is None else argv
    env = os.environ if env is None else env
    raw = {
        "size": env.get("MAZELAB_SIZE", str(SIZE_DEFAULT)),
        "gen":  env.get("MAZELAB_GEN", "recursive"),
        "seed": env.get("MAZELAB_SEED"),
    }
    for arg in argv:
        for key in raw:
            if arg.startswith(f"--{key}="):
                raw[key] = arg.split("=", 1)[1]
    try:
        size = int(raw["size"])
    except ValueError:
        size = SIZE_DEFAULT
    gen = str(raw["gen"]).lower()
    if gen not in GENERATORS:
        gen = "recursive"
    seed = None
    if raw["seed"] not in (None, ""):
        try:
            seed = int(raw["seed"])
        except ValueError:
            seed = None
    return {"size": max(SIZE_MIN, min(SIZE_MAX, size)), "gen": gen, "seed": seed}


# ---------- Layout ----------
PANEL_W = 420            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
WALL_GRAY   = ( 44, 62, 80)
FLOOR       = (236,240,241)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
EXPLORE_A   = (255,210,0,160)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
TEXT_DIM    = (160,170,180)
ACCENT_GOLD = (255,210,0)

ALGO_KEYS = {
    pygame.K_a: "astar",
    pygame.K_d: "dijkstra",
    pygame.K_b: "bfs",
    pygame.K_f: "dfs",
    pygame.K_i: "bidirectional",
}
GEN_KEYS = {
    pygame.K_1: "recursive",
    pygame.K_2: "prim",
    pygame.K_3: "kruskal",
    pygame.K_4: "empty",
}
EDIT_KEYS = {
    pygame.K_w: "wall",
    pygame.K_s: "start",
    pygame.K_e: "end",
    pygame.K_x: "none",
}


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, config: Dict[str, object]):
        pygame.init()

        self.size = int(config["size"])
        self.gen_kind = str(config["gen"])
        self.rng = random.Random(config["seed"])

        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.grid: Grid = build_maze(self.gen_kind, self.size, self.rng)

        grid_px = GRID_MARGIN*2 + self.size * CELL_SIZE_DEFAULT
        win_w = grid_px + PANEL_W
        win_h = max(grid_px, 720)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Maze Lab - {self.gen_kind}")

        self._buttons: List[UIButton] = []

        self.open_set: set = set()
        self.closed_set: set = set()
        self.current: Optional[Coord] = None
        self.path: List[Coord] = []
        self._compare_lines: List[str] = []

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 20
        self.state = "Idle"
        self.message = ""
        self.edit_mode = "none"
        self.selected_algo = "astar"
        self._t_run_start: Optional[float] = None
        self._last_step_t = 0.0

        self.algo = make_algo(self.selected_algo, self.rng)
        self._rebind_algo()
        self._layout(win_w, win_h)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(6, min(avail_w // self.grid.width, avail_h // self.grid.height)))

        plate_w = self.grid.width * self.cell_size + 2 * GRID_MARGIN
        plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (plate_w + PANEL_W)) // 2)
        top_y = max(0, (win_h - plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec) * self.algo.pace:
            self._last_step_t = t0
            self._do_step()

    # ---------- algorithm driving ----------
    def _rebind_algo(self):
        """(Re)attach the solver to the grid; also wipes the overlays."""
        self.running = False
        self.state = "Idle"
        self.open_set.clear()
        self.closed_set.clear()
        self.current = None
        self.path = []
        self._t_run_start = None
        self.algo.init(self.grid)
        self._last_metrics = {"algo": self.algo.name, "popped": 0, "open_size": 0,
                              "closed_count": 0, "path_len": 0}

    def _ensure_endpoints(self) -> bool:
        try:
            validate_endpoints(self.grid)
        except MazeError as ex:
            self.message = str(ex)
            self.state = "Blocked"
            print(f"Cannot solve: {ex}")
            return False
        return True

    def _do_step(self):
        if not self._ensure_endpoints():
            self.running = False
            return
        if self._t_run_start is None:
            self._t_run_start = time.perf_counter()
        res = self.algo.step()
        for c in res.opened: self.open_set.add(c)
        for c in res.closed:
            self.open_set.discard(c)
            self.closed_set.add(c)
        self.current = res.current
        if res.path is not None:
            self.path = res.path
            self.grid.mark_path(res.path)
        if res.status == "done":
            self.state = "Done"; self.running = False
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
        elif res.status == "error":
            self.state = "Error"; self.running = False
            self.message = self.algo.error or "search aborted"
            print(f"Search aborted: {self.message}")
        elif res.status in ("running", "idle"):
            self.state = "Running" if self.running else "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _toggle_run(self):
        if self.state in ("Done", "No path", "Error"):
            return
        if not self._ensure_endpoints():
            return
        self.message = ""
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _switch_algo(self, kind: str):
        self.selected_algo = kind
        self.algo = make_algo(kind, self.rng)
        self._rebind_algo()
        self._refresh_active_states()

    def _generate(self, kind: Optional[str] = None):
        if kind is not None:
            self.gen_kind = kind
        try:
            self.grid = build_maze(self.gen_kind, self.size, self.rng)
        except MazeError as ex:
            print(f"Failed to generate {self.gen_kind} maze: {ex}")
            return
        pygame.display.set_caption(f"Maze Lab - {self.gen_kind}")
        self._compare_lines = []
        self.message = ""
        self._rebind_algo()
        self._layout(*self.screen.get_size())

    def _compare(self):
        if not self._ensure_endpoints():
            return
        results = compare_all(self.grid, rng=self.rng)
        table = format_table(results)
        print(table)
        best = summarize(results)
        self._compare_lines = [
            f"{ALGORITHM_INFO[k]['name'][:22]:<22} {'ok' if r.success else '--':>3} "
            f"{r.path_length:>4} {r.nodes_explored:>5} {r.execution_time * 1000.0:>7.2f}ms"
            for k, r in results.items()
        ]
        if best["shortest_path"] is not None:
            self._compare_lines.append(f"shortest path: {best['shortest_path']}")
        # leave the grid showing the selected solver's batch result
        self._rebind_algo()
        chosen = results[self.selected_algo]
        self.path = list(chosen.path)
        self.closed_set = set(chosen.visited_nodes)
        self.grid.mark_path(self.path)
        self._last_metrics = {**result_metrics(chosen), "open_size": 0}
        self.state = "Compared"

    def _clear(self):
        if self.running:
            return
        self.grid.clear_walls()
        self._compare_lines = []
        self.message = ""
        self._rebind_algo()
        self._refresh_active_states()

    def _reset(self):
        self._rebind_algo()
        self.message = ""
        self._refresh_active_states()

    # ---------- editing ----------
    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Coord]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        if self.grid.in_bounds((col, row)):
            return (col, row)
        return None

    def _apply_edit(self, c: Coord):
        if self.running or self.edit_mode == "none":
            return
        if self.edit_mode == "wall":
            self.grid.toggle_wall(c)
        elif self.edit_mode == "start":
            self.grid.set_start(c)
        elif self.edit_mode == "end":
            self.grid.set_end(c)
        self._compare_lines = []
        self._rebind_algo()

    def _set_edit_mode(self, mode: str):
        self.edit_mode = mode
        self._refresh_active_states()

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_g:
                    self._generate()
                elif e.key == pygame.K_c:
                    self._compare()
                elif e.key == pygame.K_k:
                    self._clear()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self.steps_per_sec = min(120, self.steps_per_sec + 5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self.steps_per_sec = max(1, self.steps_per_sec - 5)
                elif e.key in GEN_KEYS:
                    self._generate(GEN_KEYS[e.key])
                elif e.key in ALGO_KEYS:
                    self._switch_algo(ALGO_KEYS[e.key])
                elif e.key in EDIT_KEYS:
                    self._set_edit_mode(EDIT_KEYS[e.key])
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(640, e.w), max(480, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                handled = False
                for b in self._buttons:
                    handled = b.handle_mouse(e) or handled
                if not handled and e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    c = self._cell_at(e.pos)
                    if c is not None:
                        self._apply_edit(c)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin

        for cell in self.grid:
            rect = pygame.Rect(ox + cell.x*cs, oy + cell.y*cs, cs, cs)
            pygame.draw.rect(self.screen, WALL_GRAY if cell.is_wall else FLOOR, rect)
            if cs >= 10:
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        overlay = pygame.Surface((cs, cs), pygame.SRCALPHA)
        for cells, color in ((self.closed_set, NEON_MAG_A), (self.open_set, NEON_CYAN_A)):
            overlay.fill(color)
            for (col, row) in cells:
                self.screen.blit(overlay, (ox + col*cs, oy + row*cs))
        if self.current is not None and not self.path:
            overlay.fill(EXPLORE_A)
            self.screen.blit(overlay, (ox + self.current[0]*cs, oy + self.current[1]*cs))

        if len(self.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col, row) in self.path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, (0, 255, 220, 60), False, pts, max(3, cs // 3))
            self.screen.blit(glow, (0,0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, max(2, cs // 5))

        if self.grid.start is not None:
            self._draw_badge(self.grid.start, BLUE, "S")
        if self.grid.end is not None:
            self._draw_badge(self.grid.end, RED, "E")

    def _draw_badge(self, cell: Coord, color: Tuple[int,int,int], label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx, cy), max(4, cs//2 - 2))
        if cs >= 14:
            txt = self.font_small.render(label, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 30
        gap = 6
        half = (w - 8) // 2

        def add(label, cb, rect, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, pygame.Rect(x, y, half, h), togglable=True, store_as="btn_run")
        add("Step Once", self._do_step, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Reset", self._reset, pygame.Rect(x, y, half, h))
        add("Compare All", self._compare, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Speed −", lambda: self._bump_speed(-5), pygame.Rect(x, y, half, h))
        add("Speed +", lambda: self._bump_speed(+5), pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Clear Walls", self._clear, pygame.Rect(x, y, w, h)); y += h + gap*3

        self._algo_buttons: Dict[str, UIButton] = {}
        for i, kind in enumerate(ALGORITHM_ORDER):
            rect = pygame.Rect(x + (i % 2) * (half + 8), y, half, h)
            add(ALGORITHM_INFO[kind]["name"].split(" ")[0], lambda k=kind: self._switch_algo(k), rect, togglable=True)
            self._algo_buttons[kind] = self._buttons[-1]
            if i % 2 == 1:
                y += h + gap
        y += h + gap*3

        self._gen_buttons: Dict[str, UIButton] = {}
        for i, kind in enumerate(GENERATORS):
            rect = pygame.Rect(x + (i % 2) * (half + 8), y, half, h)
            add(f"Maze: {kind}", lambda k=kind: self._generate(k), rect, togglable=True)
            self._gen_buttons[kind] = self._buttons[-1]
            if i % 2 == 1:
                y += h + gap
        y += gap*2

        self._edit_buttons: Dict[str, UIButton] = {}
        quarter = (w - 24) // 4
        for i, mode in enumerate(("wall", "start", "end", "none")):
            rect = pygame.Rect(x + i * (quarter + 8), y, quarter, h)
            add(mode.title(), lambda m=mode: self._set_edit_mode(m), rect, togglable=True)
            self._edit_buttons[mode] = self._buttons[-1]

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.running)
        for kind, btn in getattr(self, "_algo_buttons", {}).items():
            btn.set_active(kind == self.selected_algo)
        for kind, btn in getattr(self, "_gen_buttons", {}).items():
            btn.set_active(kind == self.gen_kind)
        for mode, btn in getattr(self, "_edit_buttons", {}).items():
            btn.set_active(mode == self.edit_mode)

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(120, self.steps_per_sec + dv)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT, font=None):
            nonlocal y0
            f = font or (self.font_big if big else self.font)
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 5

        info = ALGORITHM_INFO[self.selected_algo]
        line(info["name"], big=True, color=ACCENT_GOLD)
        line(info["description"], color=TEXT_DIM, font=self.font_small)
        m = self._last_metrics
        line(f"Explored: {m.get('popped', 0)}    Frontier: {m.get('open_size', 0)}")
        line(f"Visited: {m.get('closed_count', 0)}    Path Len: {m.get('path_len', 0)}")
        if self._t_run_start is not None:
            line(f"Elapsed: {(time.perf_counter() - self._t_run_start) * 1000.0:.0f} ms")
        elif "time_ms" in m:
            line(f"Batch time: {m['time_ms']:.2f} ms")
        line(f"State: {self.state}" + (f" - {self.message}" if self.message else ""))
        line(f"Maze: {self.gen_kind} {self.grid.width}x{self.grid.height}   Edit: {self.edit_mode}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font_small)

        if self._compare_lines:
            y0 = self._buttons[-1].rect.bottom + 16
            line("Comparison (path / explored / time)", color=ACCENT_GOLD, font=self.font_small)
            for text in self._compare_lines:
                line(text, font=self.font_small)


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    config = resolve_config(argv)
    try:
        viewer = Viewer(config)
    except MazeError as ex:
        print(f"Failed to build the initial maze: {ex}")
        sys.exit(1)
    viewer.run()

if __name__ == "__main__":
    main()
