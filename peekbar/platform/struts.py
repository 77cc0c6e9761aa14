"""X11 strut management -- reserve the top screen band for the panel.

While the panel is shown, maximized windows should stop below it. The
EWMH _NET_WM_STRUT_PARTIAL property carries 12 integers:

    [left, right, top, bottom,
     left_start_y,  left_end_y,
     right_start_y, right_end_y,
     top_start_x,   top_end_x,
     bottom_start_x, bottom_end_x]

The panel only ever reserves the top edge, so only `top` and the
top_start_x/top_end_x span are non-zero. `top` is measured from the
logical screen top, so a monitor that starts below y=0 adds its offset:

    ┌──────────┐ y=0
    │ monitor A│
    ├──────────┤ y=1080   <- panel on monitor B
    │ monitor B│           top = 32 + 1080
    └──────────┘

Values are physical pixels (logical * scale). The older 4-value
_NET_WM_STRUT is written alongside for window managers that ignore the
partial variant.

Gdk.property_change() is missing from common PyGObject builds, so the
properties are written with XChangeProperty through ctypes.
"""

from __future__ import annotations

import ctypes

from gi.repository import Gdk, GdkX11

ATOM_STRUT_PARTIAL = b"_NET_WM_STRUT_PARTIAL"
ATOM_STRUT = b"_NET_WM_STRUT"
ATOM_CARDINAL = b"CARDINAL"

IDX_TOP = 2
IDX_TOP_START_X = 8
IDX_TOP_END_X = 9


def set_struts(gdk_window: GdkX11.X11Window, struts: list[int]) -> None:
    """Write the raw strut arrays to X11 properties via ctypes/Xlib."""
    xlib = ctypes.cdll.LoadLibrary("libX11.so.6")
    xid = gdk_window.get_xid()
    xdisplay = ctypes.c_void_p(hash(GdkX11.X11Display.get_default().get_xdisplay()))

    xlib.XInternAtom.restype = ctypes.c_ulong
    xlib.XInternAtom.argtypes = [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_int]

    atom_partial = xlib.XInternAtom(xdisplay, ATOM_STRUT_PARTIAL, 0)
    atom_strut = xlib.XInternAtom(xdisplay, ATOM_STRUT, 0)
    xa_cardinal = xlib.XInternAtom(xdisplay, ATOM_CARDINAL, 0)

    xlib.XChangeProperty.argtypes = [
        ctypes.c_void_p,
        ctypes.c_ulong,
        ctypes.c_ulong,
        ctypes.c_ulong,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.c_void_p,
        ctypes.c_int,
    ]

    arr12 = (ctypes.c_long * 12)(*struts)
    arr4 = (ctypes.c_long * 4)(*struts[:4])

    xlib.XChangeProperty(
        xdisplay, xid, atom_partial, xa_cardinal, 32, 0, ctypes.byref(arr12), 12
    )
    xlib.XChangeProperty(
        xdisplay, xid, atom_strut, xa_cardinal, 32, 0, ctypes.byref(arr4), 4
    )
    xlib.XFlush(xdisplay)


def compute_top_struts(
    panel_height: int,
    monitor_x: int,
    monitor_y: int,
    monitor_w: int,
    scale: int,
) -> list[int]:
    """Compute the 12-value strut array reserving the top band of a monitor.

    Inputs are logical pixels; outputs are physical pixels.
    """
    struts = [0] * 12
    struts[IDX_TOP] = int((panel_height + monitor_y) * scale)
    struts[IDX_TOP_START_X] = int(monitor_x * scale)
    struts[IDX_TOP_END_X] = int((monitor_x + monitor_w) * scale) - 1
    return struts


def set_panel_struts(
    gdk_window: GdkX11.X11Window,
    panel_height: int,
    monitor_geom: Gdk.Rectangle,
) -> None:
    """Reserve the top band of the monitor for the panel."""
    struts = compute_top_struts(
        panel_height=panel_height,
        monitor_x=monitor_geom.x,
        monitor_y=monitor_geom.y,
        monitor_w=monitor_geom.width,
        scale=gdk_window.get_scale_factor(),
    )
    set_struts(gdk_window=gdk_window, struts=struts)


def clear_struts(gdk_window: GdkX11.X11Window) -> None:
    """Remove strut reservation by setting all struts to zero."""
    set_struts(gdk_window=gdk_window, struts=[0] * 12)
