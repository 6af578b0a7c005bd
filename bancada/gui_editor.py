import math
import os
import tkinter as tk
from tkinter import simpledialog, filedialog, messagebox, ttk
from collections import defaultdict
from typing import Dict, List

from PIL import Image, ImageTk

from automatos.arquivo import load_snapshot, save_snapshot
from automatos.base import AutomatonFactory, AutomatonSnapshot, recognition_mode
from automatos.registro import get_automaton_factory, list_automaton_types
from automatos.simulacao import SimulationDriver

STATE_RADIUS = 24
FONT = ("Helvetica", 13)
ANIM_MS = 600

RESULT_COLORS = {"accepted": "#16a34a", "rejected": "#dc2626", "incomplete": "#f59e0b", "transduced": "#0284c7"}
RESULT_TEXT = {"accepted": "ACEITO", "rejected": "REJEITADO", "incomplete": "INCOMPLETO", "transduced": "TRANSDUZIDO"}

LABEL_HELP = {
    "dfa": "Símbolos separados por vírgula (ex: a, b, ab)",
    "nfa": "Símbolos separados por vírgula; use ε para transição vazia",
    "mealy": "Pares 'entrada/saída' separados por vírgula (ex: a/x, b/y)",
    "moore": "Símbolos separados por vírgula (ex: a, b)",
    "pda": "'lido, desempilha → empilha' (ex: a, $ → A$); vazio vale ε",
    "turing": "'lido/escrito, direção' com direção L, R ou S (ex: a/b, R)",
}


class Tooltip:
    """ Cria um tooltip (dica de ferramenta) para um widget. """
    def __init__(self, widget, text):
        self.widget = widget
        self.text = text
        self.tooltip_window = None
        self.widget.bind("<Enter>", self.show_tooltip)
        self.widget.bind("<Leave>", self.hide_tooltip)

    def show_tooltip(self, event):
        if not self.widget.winfo_exists(): return
        x = self.widget.winfo_pointerx() + 15
        y = self.widget.winfo_pointery() + 10

        self.tooltip_window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")
        label = tk.Label(tw, text=self.text, justify='left',
                         background="#ffffe0", relief='solid', borderwidth=1,
                         font=("tahoma", "8", "normal"))
        label.pack(ipadx=1)

    def hide_tooltip(self, event=None):
        tw = self.tooltip_window
        self.tooltip_window = None
        if tw:
            try: tw.destroy()
            except tk.TclError: pass


class EditorGUI:
    """ Editor genérico: funciona com qualquer tipo registrado no registro de autômatos. """
    def __init__(self, root: tk.Toplevel, kind: str = "dfa"):
        self.root = root
        try:
            root.state('zoomed')
        except tk.TclError:
            root.geometry("1100x750")

        style = ttk.Style()
        style.configure("TButton", padding=(15, 12))
        style.configure("Accent.TButton", padding=(15, 12))
        style.configure("Toolbutton", padding=(10, 8), relief="flat")

        self.mode = "select"
        self.dragging = None
        self.transition_src = None
        self.icons: Dict[str, ImageTk.PhotoImage] = {}
        self.edge_labels: Dict[tuple, tuple] = {}
        self.current_filepath = None

        factory = get_automaton_factory(kind)
        self._set_factory(factory, factory.create_empty())

        self._build_toolbar()
        self._build_canvas()
        self._build_bottom_bar()
        self._build_statusbar()
        self._bind_events()
        self.draw_all()

    def _set_factory(self, factory: AutomatonFactory, snapshot: AutomatonSnapshot):
        self.factory = factory
        self.snapshot = snapshot
        self.driver = SimulationDriver(factory, scheduler=self.root, interval_ms=ANIM_MS)
        self.driver.subscribe(lambda d: self.draw_all())
        self.root.title(f"Editor - {factory.config.display_name}")

    def _build_toolbar(self):
        toolbar = tk.Frame(self.root)
        toolbar.pack(side=tk.TOP, fill=tk.X, padx=10, pady=(5, 10))

        file_menu = tk.Menu(toolbar, tearoff=0)
        file_menu.add_command(label="Novo", command=self.cmd_new)
        file_menu.add_command(label="Abrir...", command=self.cmd_open)
        file_menu.add_command(label="Salvar", command=self.cmd_save)
        file_menu.add_command(label="Salvar Como...", command=self.cmd_save_as)
        self._create_toolbar_menubutton(toolbar, "arquivo", "Arquivo", file_menu)
        ttk.Separator(toolbar, orient='vertical').pack(side=tk.LEFT, padx=8, fill='y')

        self._create_toolbar_button(toolbar, "novo_estado", "Novo Estado", lambda: self._set_mode("add_state"))
        self._create_toolbar_button(toolbar, "nova_transicao", "Nova Transição", lambda: self._set_mode("add_transition_src"))
        self._create_toolbar_button(toolbar, "definir_inicio", "Definir Início", lambda: self._set_mode("set_start"))
        self._create_toolbar_button(toolbar, "alternar_final", "Alternar Final", lambda: self._set_mode("toggle_final"))
        self._create_toolbar_button(toolbar, "excluir_estado", "Excluir Estado", lambda: self._set_mode("delete_state"))
        ttk.Separator(toolbar, orient='vertical').pack(side=tk.LEFT, padx=8, fill='y')

        self.convert_menu = tk.Menu(toolbar, tearoff=0)
        for kind, name in list_automaton_types():
            self.convert_menu.add_command(label=name, command=lambda k=kind: self.cmd_convert(k))
        self._create_toolbar_menubutton(toolbar, "converter", "Converter para", self.convert_menu)
        self._create_toolbar_button(toolbar, "configurar", "Configurações", self.cmd_edit_meta)

        self.mode_label = ttk.Label(toolbar, text="Modo: Selecionar", font=("Helvetica", 11, "bold"))
        self.mode_label.pack(side=tk.RIGHT, padx=10)

    def _load_icon(self, icon_name):
        icon_path = os.path.join("icons", f"{icon_name}.png")
        try:
            img = Image.open(icon_path).convert("RGBA")
            img = img.resize((40, 40), Image.Resampling.LANCZOS)
            self.icons[icon_name] = ImageTk.PhotoImage(img)
            return self.icons[icon_name]
        except OSError:
            return None

    def _create_toolbar_menubutton(self, parent, icon_name, tooltip_text, menu):
        icon = self._load_icon(icon_name)
        if icon:
            button = ttk.Menubutton(parent, image=icon, style="Toolbutton")
        else:
            button = ttk.Menubutton(parent, text=tooltip_text)
        button["menu"] = menu
        button.pack(side=tk.LEFT, padx=2)
        Tooltip(button, tooltip_text)

    def _create_toolbar_button(self, parent, icon_name, tooltip_text, command):
        icon = self._load_icon(icon_name)
        if icon:
            button = ttk.Button(parent, image=icon, command=command, style="Toolbutton")
        else:
            button = ttk.Button(parent, text=tooltip_text, command=command)
        button.pack(side=tk.LEFT, padx=2)
        Tooltip(button, tooltip_text)

    def _build_canvas(self):
        self.canvas = tk.Canvas(self.root, bg="white")
        self.canvas.pack(fill=tk.BOTH, expand=True, padx=10, pady=0)

    def _build_bottom_bar(self):
        bottom = tk.Frame(self.root)
        bottom.pack(side=tk.BOTTOM, fill=tk.X, padx=10, pady=10)

        ttk.Label(bottom, text="Entrada:", font=("Helvetica", 10)).pack(side=tk.LEFT)
        self.input_entry = ttk.Entry(bottom, width=30, font=("Helvetica", 11))
        self.input_entry.pack(side=tk.LEFT, padx=5, ipady=5)

        ttk.Button(bottom, text="Simular", command=self.cmd_start_simulation, style="Accent.TButton").pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Voltar", command=self.driver_step_backward).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Passo", command=self.driver_step_forward).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Play/Pausar", command=lambda: self.driver.toggle_play()).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Reiniciar", command=self.cmd_reset_sim).pack(side=tk.LEFT, padx=2)

        self.sim_display_canvas = tk.Canvas(bottom, height=60, bg="#f0f0f0", highlightthickness=1, highlightbackground="#cccccc")
        self.sim_display_canvas.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=10)

    def _build_statusbar(self):
        self.status = tk.Label(self.root, text="Pronto", anchor="w", relief=tk.SUNKEN, padx=5)
        self.status.pack(side=tk.BOTTOM, fill=tk.X)

    def _bind_events(self):
        self.canvas.bind("<Button-1>", self.on_canvas_click)
        self.canvas.bind("<B1-Motion>", self.on_canvas_drag)
        self.canvas.bind("<ButtonRelease-1>", lambda e: setattr(self, "dragging", None))
        self.canvas.bind("<Button-3>", self.on_right_click)
        self.root.bind("<Escape>", lambda e: self._set_mode("select"))

    def _set_mode(self, new_mode):
        self.mode = new_mode
        mode_text_map = {
            "select": "Modo: Selecionar", "add_state": "Modo: Adicionar Estado",
            "add_transition_src": "Modo: Adicionar Transição (Origem)",
            "add_transition_dst": "Modo: Adicionar Transição (Destino)",
            "set_start": "Modo: Definir Início", "toggle_final": "Modo: Alternar Final",
            "delete_state": "Modo: Excluir Estado",
        }
        cursor = "crosshair" if new_mode == "add_state" else ("X_cursor" if new_mode == "delete_state" else "hand2")
        self.canvas.config(cursor="arrow" if new_mode == "select" else cursor)
        self.mode_label.config(text=mode_text_map.get(new_mode, "Modo: Selecionar"))

    # Arquivo

    def cmd_new(self):
        self.driver.reset()
        self._set_factory(self.factory, self.factory.create_empty())
        self.current_filepath = None
        self.draw_all(); self.status.config(text="Novo autômato.")

    def cmd_open(self):
        path = filedialog.askopenfilename(defaultextension=".json", filetypes=[("Autômatos", "*.json"), ("All", "*.*")])
        if not path: return
        try:
            snapshot = load_snapshot(path)
            factory = get_automaton_factory(snapshot.kind)
        except Exception as e:
            messagebox.showerror("Erro Abrir", f"Falha:\n{e}", parent=self.root)
            return
        self.driver.reset()
        self._set_factory(factory, snapshot)
        self.current_filepath = path
        self.draw_all()
        self.status.config(text=f"Arquivo '{os.path.basename(path)}' carregado.")

    def cmd_save(self):
        if not self.current_filepath:
            self.cmd_save_as()
            return
        try:
            save_snapshot(self.snapshot, self.current_filepath)
            self.status.config(text=f"Salvo em '{os.path.basename(self.current_filepath)}'.")
        except OSError as e:
            messagebox.showerror("Erro Salvar", f"Falha:\n{e}", parent=self.root)

    def cmd_save_as(self):
        path = filedialog.asksaveasfilename(defaultextension=".json", filetypes=[("Autômatos", "*.json"), ("All", "*.*")])
        if not path: return
        self.current_filepath = path
        self.cmd_save()

    # Conversão e meta

    def cmd_convert(self, kind: str):
        if kind == self.factory.config.kind:
            return
        target = get_automaton_factory(kind)
        result = target.convert_from(self.snapshot)
        self.driver.reset()
        self._set_factory(target, result.snapshot)
        self.draw_all()
        if result.warnings:
            messagebox.showwarning("Conversão", "\n".join(result.warnings), parent=self.root)
        self.status.config(text=f"Convertido para {target.config.display_name}.")

    def cmd_edit_meta(self):
        defaults = self.factory.config.default_meta
        if not defaults:
            messagebox.showinfo("Configurações", "Este tipo não possui configurações.", parent=self.root)
            return
        for key, default in defaults.items():
            current = self.snapshot.meta.get(key, default)
            value = simpledialog.askstring("Configurações", f"{key}:", initialvalue=str(current), parent=self.root)
            if value is None:
                return
            try:
                self.snapshot.meta[key] = self._parse_meta_value(key, value.strip(), default)
            except ValueError as e:
                messagebox.showerror("Configurações", str(e), parent=self.root)
                return
        self.status.config(text="Configurações atualizadas.")
        self.draw_all()

    def _parse_meta_value(self, key, value, default):
        if key == "recognitionMode":
            if value.lower() in ("", "false", "não", "nao"):
                return False
            if value.lower() == "true":
                return True
            if value not in ("consumption", "final"):
                raise ValueError("Modo de reconhecimento: false, consumption ou final.")
            return value
        if key == "acceptanceMode" and value not in ("final", "empty-stack"):
            raise ValueError("Modo de aceitação: final ou empty-stack.")
        if isinstance(default, int):
            if not value.isdigit() or int(value) <= 0:
                raise ValueError(f"'{key}' deve ser um inteiro positivo.")
            return int(value)
        return value or default

    # Simulação

    def cmd_start_simulation(self):
        input_str = self.input_entry.get()
        if self.snapshot.initial_state() is None:
            messagebox.showwarning("Simulação", "Defina estado inicial.", parent=self.root)
            return
        result = self.driver.run(self.snapshot, input_str)
        self.status.config(text=f"Simulação iniciada para '{input_str}' ({len(result.steps)} passos).")

    def driver_step_forward(self):
        if not self.driver.is_simulating:
            self.status.config(text="Nenhuma simulação ativa."); return
        if not self.driver.step_forward():
            self.status.config(text=f"Fim da simulação: {RESULT_TEXT.get(self.driver.result.status)}")
        else:
            self.status.config(text=f"Passo {self.driver.index}...")

    def driver_step_backward(self):
        if self.driver.step_backward():
            self.status.config(text=f"Passo {self.driver.index}...")

    def cmd_reset_sim(self):
        self.driver.reset()
        self.status.config(text="Simulação reiniciada.")

    # Eventos do canvas

    def _find_state_at(self, x, y):
        for s in self.snapshot.states:
            if math.hypot(x - s.x, y - s.y) <= STATE_RADIUS:
                return s
        return None

    def _find_edge_at(self, x, y):
        for key, (tx, ty) in self.edge_labels.items():
            if math.hypot(x - tx, y - ty) <= 20:
                return key
        return None

    def _next_transition_id(self) -> str:
        used = {t.id for t in self.snapshot.transitions}
        n = len(used)
        while f"t{n}" in used:
            n += 1
        return f"t{n}"

    def on_canvas_click(self, event):
        clicked = self._find_state_at(event.x, event.y)

        if self.mode == "add_state":
            used = {s.id for s in self.snapshot.states}
            index = len(used)
            while f"q{index}" in used:
                index += 1
            state = self.factory.config.create_state(index, event.x, event.y)
            if self.snapshot.initial_state() is not None:
                state.is_initial = False
            self.snapshot.states.append(state)
            self.draw_all(); self.status.config(text=f"Estado '{state.id}' adicionado.")
            return

        if clicked is None:
            return

        if self.mode == "set_start":
            for s in self.snapshot.states:
                s.is_initial = (s.id == clicked.id)
            self._set_mode("select"); self.draw_all()
            self.status.config(text=f"'{clicked.id}' definido como inicial.")
        elif self.mode == "toggle_final":
            clicked.is_final = not clicked.is_final
            self._set_mode("select"); self.draw_all()
            self.status.config(text=f"Estado final '{clicked.id}' alternado.")
        elif self.mode == "delete_state":
            self._delete_state(clicked.id)
            self._set_mode("select")
        elif self.mode == "add_transition_src":
            self.transition_src = clicked.id; self._set_mode("add_transition_dst")
            self.status.config(text=f"Origem {clicked.id}. Clique no destino.")
        elif self.mode == "add_transition_dst":
            self._add_transition(self.transition_src, clicked.id)
            self.transition_src = None; self._set_mode("select")
        else:
            self.dragging = clicked

    def _add_transition(self, src: str, dst: str):
        config = self.factory.config
        label = simpledialog.askstring(
            "Adicionar Transição", f"Transição de '{src}' para '{dst}':\n{LABEL_HELP.get(config.kind, '')}",
            parent=self.root)
        if not label:
            self.status.config(text="Adição cancelada.")
            return
        try:
            transition = config.transition_from_label(self._next_transition_id(), src, dst, label)
            transition = config.normalize_transition(transition, self.snapshot.meta)
        except ValueError as e:
            messagebox.showerror("Erro Formato", str(e), parent=self.root)
            return
        error = config.validate_add_transition(self.snapshot, transition)
        if error:
            messagebox.showerror("Transição inválida", error, parent=self.root)
            return
        self.snapshot.transitions.append(transition)
        self.draw_all(); self.status.config(text=f"Transição {src} -> {dst} adicionada.")

    def _delete_state(self, state_id: str):
        if not messagebox.askyesno("Excluir", f"Excluir estado '{state_id}'?", parent=self.root):
            return
        self.snapshot.states = [s for s in self.snapshot.states if s.id != state_id]
        self.snapshot.transitions = [t for t in self.snapshot.transitions if state_id not in (t.src, t.dst)]
        self.draw_all(); self.status.config(text=f"Estado '{state_id}' excluído.")

    def _delete_edge(self, src: str, dst: str):
        if messagebox.askyesno("Excluir Transições", f"Excluir TODAS as transições de '{src}' para '{dst}'?", parent=self.root):
            self.snapshot.transitions = [t for t in self.snapshot.transitions if (t.src, t.dst) != (src, dst)]
            self.draw_all(); self.status.config(text=f"Transições de {src} para {dst} excluídas.")

    def on_canvas_drag(self, event):
        if self.dragging is not None:
            self.dragging.x, self.dragging.y = event.x, event.y
            self.draw_all()

    def on_right_click(self, event):
        state = self._find_state_at(event.x, event.y)
        menu = tk.Menu(self.root, tearoff=0)
        if state is not None:
            menu.add_command(label="Renomear", command=lambda s=state: self._rename_state(s))
            if self.factory.config.capabilities.supports_output_per_state:
                menu.add_command(label="Definir saída...", command=lambda s=state: self._edit_output(s))
            menu.add_separator()
            menu.add_command(label="Excluir", command=lambda s=state: self._delete_state(s.id))
        else:
            edge = self._find_edge_at(event.x, event.y)
            if edge is None:
                return
            menu.add_command(label="Excluir todas as transições", command=lambda e=edge: self._delete_edge(*e))
        menu.tk_popup(event.x_root, event.y_root)

    def _rename_state(self, state):
        new_label = simpledialog.askstring("Renomear", f"Novo rótulo para '{state.label}':", initialvalue=state.label, parent=self.root)
        if new_label:
            state.label = new_label
            self.draw_all()

    def _edit_output(self, state):
        value = simpledialog.askstring("Saída", f"Saída de '{state.label}':", initialvalue=state.output or "", parent=self.root)
        if value is not None:
            state.output = value.strip()
            self.draw_all(); self.status.config(text=f"Saída de '{state.label}' atualizada.")

    # Desenho

    def draw_all(self):
        if not hasattr(self, "canvas"):
            return
        self.canvas.delete("all")
        self.edge_labels.clear()
        self._draw_edges_and_states()
        self._draw_simulation_display()

    def _draw_edges_and_states(self):
        active = set(self.driver.active_state_ids)
        config = self.factory.config
        agg: Dict[tuple, List[str]] = defaultdict(list)
        for t in self.snapshot.transitions:
            agg[(t.src, t.dst)].append(config.format_transition_label(t))

        for (src, dst), labels in agg.items():
            a, b = self.snapshot.state(src), self.snapshot.state(dst)
            if a is None or b is None: continue
            text = "\n".join(labels)
            if src == dst:
                r = STATE_RADIUS
                p1 = (a.x - r * 0.5, a.y - r * 0.8); c1 = (a.x - r * 1.5, a.y - r * 2.5)
                c2 = (a.x + r * 1.5, a.y - r * 2.5); p2 = (a.x + r * 0.5, a.y - r * 0.8)
                self.canvas.create_line(p1, c1, c2, p2, smooth=True, arrow=tk.LAST, width=1.5)
                tx, ty = a.x, a.y - r * 2.3
            else:
                dx, dy = b.x - a.x, b.y - a.y; dist = math.hypot(dx, dy) or 1; ux, uy = dx / dist, dy / dist
                bend = 0.25 if (dst, src) in agg else 0
                sx, sy = a.x + ux * STATE_RADIUS, a.y + uy * STATE_RADIUS
                ex, ey = b.x - ux * STATE_RADIUS, b.y - uy * STATE_RADIUS
                mx, my = (sx + ex) / 2, (sy + ey) / 2
                cx, cy = mx - uy * dist * bend, my + ux * dist * bend
                self.canvas.create_line(sx, sy, cx, cy, ex, ey, smooth=True, arrow=tk.LAST, width=1.5)
                tx, ty = cx - uy * 15, cy + ux * 15
            self.canvas.create_text(tx, ty, text=text, justify=tk.CENTER, font=("Helvetica", 9))
            self.edge_labels[(src, dst)] = (tx, ty)

        for s in self.snapshot.states:
            r = STATE_RADIUS
            fill, outl, wd = ("#e0f2fe", "#0284c7", 3) if s.id in active else ("white", "black", 2)
            self.canvas.create_oval(s.x - r, s.y - r, s.x + r, s.y + r, fill=fill, outline=outl, width=wd)
            if s.is_final:
                self.canvas.create_oval(s.x - (r - 4), s.y - (r - 4), s.x + (r - 4), s.y + (r - 4), outline="black", width=1)
            text = s.label if s.output is None else f"{s.label}\n{s.output}"
            self.canvas.create_text(s.x, s.y, text=text, font=FONT if s.output is None else ("Helvetica", 10))
            if s.is_initial:
                self.canvas.create_line(s.x - r * 2, s.y, s.x - r, s.y, arrow=tk.LAST, width=2)

        result = self.driver.result
        if result is not None and self.driver.is_finished:
            self.canvas.create_text(self.canvas.winfo_width() - 10, 20, text=RESULT_TEXT.get(result.status, result.status),
                                    font=("Helvetica", 16, "bold"), fill=RESULT_COLORS.get(result.status, "#555"), anchor="ne")

    def _draw_simulation_display(self):
        """ Mostra a configuração do passo atual: fita, pilha, saída e entrada restante. """
        canvas = self.sim_display_canvas
        canvas.delete("all")
        try:
            canvas_w = canvas.winfo_width(); canvas_h = canvas.winfo_height()
        except tk.TclError:
            return

        step = self.driver.current_step
        if step is None:
            canvas.create_text(canvas_w / 2, canvas_h / 2, text="Simulação", font=("Helvetica", 10, "italic"), fill="#888")
            return

        if step.tape is not None:
            self._draw_tape(canvas, step, canvas_w, canvas_h)
            return

        parts = [f"Passo {self.driver.index}/{len(self.driver.result.steps) - 1}"]
        if step.active_states is not None:
            parts.append("Estados: {" + ", ".join(step.active_states) + "}")
        if step.remaining_input is not None:
            parts.append(f"Resta: '{step.remaining_input}'")
        if step.stack is not None:
            parts.append("Pilha: " + "".join(reversed(step.stack)))
        if step.cumulative_output is not None or recognition_mode(self.snapshot.meta) is not None:
            parts.append(f"Saída: '{step.cumulative_output or ''}'")
        canvas.create_text(10, canvas_h / 2, text="    ".join(parts), font=("Courier", 11), anchor="w")

    def _draw_tape(self, canvas, step, canvas_w, canvas_h):
        blank = self.snapshot.meta.get("blank", "_")
        head_pos = step.head_position or 0
        cell_w, cell_h = 35, 35
        center_x = canvas_w / 2
        y1 = (canvas_h - cell_h) / 2
        num_cells_half = (canvas_w // cell_w) // 2 + 2

        for i in range(head_pos - num_cells_half, head_pos + num_cells_half + 1):
            symbol = step.tape[i] if 0 <= i < len(step.tape) else blank
            x1 = center_x + (i - head_pos) * cell_w - cell_w / 2
            fill = "#e0f2fe" if i == head_pos else "#f1f5f9"
            canvas.create_rectangle(x1, y1, x1 + cell_w, y1 + cell_h, fill=fill, outline="#cbd5e1")
            canvas.create_text(x1 + cell_w / 2, y1 + cell_h / 2, text=symbol, font=("Courier", 12))

        canvas.create_polygon(center_x, y1 - 2, center_x - 6, y1 - 10, center_x + 6, y1 - 10, fill="black")
