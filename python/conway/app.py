import time

import numpy as np

import taichi as ti

from conway import _logging
from conway.render import Presenter

FRAME_LOG_INTERVAL = 5.0  # seconds


class FrameTimer:
    """Accumulates frame times and logs the average every few seconds."""

    def __init__(self, interval=FRAME_LOG_INTERVAL):
        self.interval = interval
        self.frames = 0
        self.elapsed = 0.0
        self._last = time.perf_counter()

    def tick(self):
        now = time.perf_counter()
        self.elapsed += now - self._last
        self._last = now
        self.frames += 1
        if self.elapsed >= self.interval:
            fps = self.frames / self.elapsed
            _logging.info(f"frame time {1000.0 / fps:.2f}ms ({fps:.1f} fps)")
            self.frames = 0
            self.elapsed = 0.0


def frame_rate_limit(config):
    """Frames per second that keep the simulation at ``config.tick_rate`` ticks per second.

    Returns ``None`` (no cap) for an unlimited tick rate.
    """
    if config.tick_rate == 0:
        return None
    return config.tick_rate / config.steps_per_frame


def run_interactive(sim, title="Game of Life"):
    """Shows ``sim`` in a window until it is closed.

    Controls: SPACE pauses, ``r`` reseeds, ``c`` clears, the left / right mouse
    buttons paint alive / dead cells and ESC quits.
    """
    config = sim.config
    presenter = Presenter(config.window_res)
    gui = ti.GUI(title, res=config.window_res)
    gui.fps_limit = frame_rate_limit(config)

    print("[Hint] Press `r` to reseed, `c` to clear")
    print("[Hint] Press SPACE to pause")
    print("[Hint] Click LMB, RMB and drag to add alive / dead cells")

    timer = FrameTimer()
    paused = False
    while gui.running:
        for e in gui.get_events(gui.PRESS):
            if e.key == gui.ESCAPE:
                gui.running = False
            elif e.key == gui.SPACE:
                paused = not paused
            elif e.key == "r":
                sim.seed()
            elif e.key == "c":
                sim.clear()

        if gui.is_pressed(gui.LMB, gui.RMB):
            sim.paint(np.array([gui.get_cursor_pos()]), gui.is_pressed(gui.LMB))
            paused = True

        if not paused:
            sim.step(config.steps_per_frame)

        gui.set_image(presenter.present(sim.current))
        gui.text(f"Living cells: {sim.count_alive()}", (0.01, 0.99), font_size=24, color=0xFFFFFF)
        gui.text(f"Generation: {sim.tick}", (0.01, 0.95), font_size=24, color=0xFFFFFF)
        gui.show()
        timer.tick()


def record_video(sim, output_dir, frames, framerate=24, gif=False):
    """Renders ``frames`` generations of ``sim`` headlessly into a video.

    Returns:
        str: Directory the video was written to.
    """
    config = sim.config
    presenter = Presenter(config.window_res)
    video_manager = ti.tools.VideoManager(output_dir=output_dir, framerate=framerate, automatic_build=False)
    gui = ti.GUI("Game of Life", res=config.window_res, show_gui=False)

    for _ in range(frames):
        gui.set_image(presenter.present(sim.current))
        video_manager.write_frame(gui.get_image())
        gui.clear()
        sim.step(config.steps_per_frame)
    video_manager.make_video(mp4=not gif, gif=gif)
    _logging.info(f"Wrote {frames} frames to {output_dir}")
    return output_dir
