import tkinter as tk
from tkinter import font
from tkinter import ttk
import os
import ctypes
from PIL import Image, ImageTk

from automatos.registro import list_automaton_types
from bancada.gui_editor import EditorGUI
import sv_ttk

class MainMenu:
    def __init__(self, root):
        self.root = root
        self.root.title("IC-Tômato Workbench")
        self.root.geometry("500x820")

        self.root.eval('tk::PlaceWindow . center')

        main_frame = tk.Frame(root, padx=20, pady=20)
        main_frame.pack(expand=True)

        self.load_logo()

        title_font = font.Font(family="Helvetica", size=28, weight="bold")
        subtitle_font = font.Font(family="Helvetica", size=16, weight="bold")

        title_canvas = tk.Canvas(main_frame, height=60, bg=main_frame.cget('bg'), highlightthickness=0)
        title_canvas.pack(pady=(0, 5))

        glow_color = "#ffc107"
        for i in range(1, 3):
            title_canvas.create_text(200 - i, 30 - i, text="IC-Tômato", font=title_font, fill=glow_color, anchor='center')
            title_canvas.create_text(200 + i, 30 + i, text="IC-Tômato", font=title_font, fill=glow_color, anchor='center')

        title_canvas.create_text(200, 30, text="IC-Tômato", font=title_font, fill="white", anchor='center')

        label = ttk.Label(main_frame, text="Selecione o tipo de autômato", font=subtitle_font)
        label.pack(pady=(0, 25))

        for kind, name in list_automaton_types():
            self.create_menu_option(main_frame, text=name, command=lambda k=kind: self.open_editor_window(k))

    def create_menu_option(self, parent, text, command):
        """Cria um botão customizado com efeito de hover."""
        NORMAL_BG = "#ffc107"
        HOVER_BG = "#007bff"
        NORMAL_FG = "#212529"
        HOVER_FG = "white"

        frame = tk.Frame(parent, bg=NORMAL_BG)
        frame.pack(pady=8, fill='x')

        label = tk.Label(frame, text=text, bg=NORMAL_BG, fg=NORMAL_FG,
                         font=("Helvetica", 12, "bold"), pady=20, cursor="hand2")
        label.pack(fill='x')

        frame.bind("<Enter>", lambda e: (frame.config(bg=HOVER_BG), label.config(bg=HOVER_BG, fg=HOVER_FG)))
        frame.bind("<Leave>", lambda e: (frame.config(bg=NORMAL_BG), label.config(bg=NORMAL_BG, fg=NORMAL_FG)))

        frame.bind("<Button-1>", lambda e: command())
        label.bind("<Button-1>", lambda e: command())

    def load_logo(self):
        """Carrega e exibe o logo no canto superior direito, se existir."""
        icon_path = os.path.join(os.path.dirname(__file__), "icons", "icon.ico")
        self.icon_path = None
        if not os.path.exists(icon_path):
            return
        try:
            image = Image.open(icon_path)
            display_img = image.resize((80, 80), Image.Resampling.LANCZOS)
            icon_img = image.resize((32, 32), Image.Resampling.LANCZOS)

            self.logo_image = ImageTk.PhotoImage(display_img)
            self.icon_image = ImageTk.PhotoImage(icon_img)
            try:
                self.root.iconphoto(False, self.icon_image)
            except tk.TclError:
                pass

            logo_label = tk.Label(self.root, image=self.logo_image, bg=self.root.cget('bg'))
            logo_label.place(relx=1.0, y=10, x=-10, anchor='ne')
            self.icon_path = icon_path
        except OSError as e:
            print(f"Não foi possível carregar o logo: {e}")

    def open_editor_window(self, kind):
        """Oculta o menu principal e abre o editor do tipo escolhido.

        Ao fechar a janela do editor, o menu principal é restaurado.
        """
        self.root.withdraw()

        editor_window = tk.Toplevel(self.root)
        if hasattr(self, 'icon_image'):
            try:
                editor_window.iconphoto(False, self.icon_image)
            except tk.TclError:
                pass
        EditorGUI(editor_window, kind)

        def on_close():
            editor_window.destroy()
            self.root.deiconify()

        editor_window.protocol("WM_DELETE_WINDOW", on_close)

def main():
    root = tk.Tk()

    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except Exception:
        pass

    sv_ttk.set_theme("light")

    MainMenu(root)
    root.mainloop()

if __name__ == "__main__":
    main()
