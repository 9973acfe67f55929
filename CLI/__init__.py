# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console import Console
from rich.panel   import Panel
from rich         import box
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(ust_bilgi: bool = True):
    """Kapanış mesajını bas"""
    if ust_bilgi:
        konsol.print("\n")
    konsol.print("[bold red]Çıkış yapıldı..[/]", width=70, justify="center")

def hata_yakala(hata: Exception):
    """Yakalanmamış hatayı panel olarak bas ve çık"""
    konsol.print(
        Panel(
            f"[bold red]{type(hata).__name__}[/] [blue]»[/] [yellow]{hata}[/]",
            title   = "[bold red]Hata[/]",
            box     = box.ROUNDED,
            width   = 70,
        )
    )
    sys.exit(1)
