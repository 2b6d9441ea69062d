"""
Utilidades para el manejo de fechas y zonas horarias.
Este módulo contiene funciones para el manejo de fechas, conversiones, y formato.
"""
import re
import pytz
import calendar
from datetime import date, datetime, timedelta
from typing import Optional
from app.infrastructure.config.config.settings import TimeZones, TIMEZONE_MAP, DEFAULT_TIMEZONE

DAY_NAMES = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]
MONTH_NAMES = ["", "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
               "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre"]

# Mapeo de nombres de días en español a números (0=Lunes, 6=Domingo)
DIAS = {
    'lunes': 0, 'martes': 1, 'miércoles': 2, 'miercoles': 2,
    'jueves': 3, 'viernes': 4, 'sábado': 5, 'sabado': 5, 'domingo': 6
}

# Mapeo de nombres de meses en español a números
MESES = {
    'enero': 1, 'febrero': 2, 'marzo': 3, 'abril': 4, 'mayo': 5, 'junio': 6,
    'julio': 7, 'agosto': 8, 'septiembre': 9, 'setiembre': 9,
    'octubre': 10, 'noviembre': 11, 'diciembre': 12
}

def get_timezone_instance(tz: TimeZones = DEFAULT_TIMEZONE) -> pytz.BaseTzInfo:
    """
    Obtiene la instancia de zona horaria basada en la enumeración.

    Args:
        tz: La zona horaria a utilizar (de la enumeración TimeZones)

    Returns:
        Instancia de pytz.timezone para la zona horaria solicitada
    """
    return pytz.timezone(TIMEZONE_MAP[tz])

def today_local(tz: TimeZones = DEFAULT_TIMEZONE) -> date:
    """Fecha de hoy en la zona horaria configurada."""
    return datetime.now(get_timezone_instance(tz)).date()

def format_date_iso(date_obj: date) -> str:
    """Formato yyyy-MM-dd que espera el webhook de agendamiento."""
    return date_obj.strftime("%Y-%m-%d")

def format_date_human_readable(date_obj: date, include_year: bool = True) -> str:
    """
    Formatea una fecha en formato legible en español.

    Args:
        date_obj: Fecha a formatear
        include_year: Si se debe incluir el año en el formato

    Returns:
        Cadena formateada con la fecha en español
    """
    day_name = DAY_NAMES[date_obj.weekday()]
    month = MONTH_NAMES[date_obj.month]

    if include_year:
        return f"{day_name} {date_obj.day} de {month} de {date_obj.year}"
    return f"{day_name} {date_obj.day} de {month}"

def parse_date_expression(date_expression: str, today: date) -> date:
    """
    Interpreta una fecha escrita como YYYY-MM-DD o en lenguaje natural.

    Acepta "hoy", "mañana", "pasado mañana", nombres de días ("el lunes")
    y fechas como "15 de mayo" o "15 de mayo de 2025".

    Args:
        date_expression: Expresión de fecha
        today: Fecha actual

    Returns:
        La fecha interpretada

    Raises:
        ValueError: Si la expresión no se puede interpretar
    """
    expression = (date_expression or "").lower().strip()
    if not expression:
        raise ValueError("Fecha vacía")

    # Caso 1: Fecha con formato estándar (YYYY-MM-DD)
    if re.match(r'^\d{4}-\d{2}-\d{2}$', expression):
        return datetime.strptime(expression, "%Y-%m-%d").date()

    # Caso 2: Expresiones relativas simples ("pasado mañana" antes que "mañana")
    if "hoy" in expression:
        return today
    if any(expr in expression for expr in ["pasado mañana", "pasado manana"]):
        return today + timedelta(days=2)
    if any(expr in expression for expr in ["mañana", "manana"]):
        return today + timedelta(days=1)

    # Caso 3: Fecha específica (ej. "31 de marzo" o "31 de marzo de 2025")
    match = re.search(r'(\d{1,2})\s+de\s+(\w+)(?:\s+(?:de|del)\s+(\d{4}))?', expression)
    if match:
        return _resolve_day_of_month(
            int(match.group(1)), match.group(2), match.group(3), today
        )

    # Caso 4: Próximo día de la semana (ej. "lunes próximo")
    dia_mencionado = next((dia for dia in DIAS if dia in expression), None)
    if dia_mencionado:
        dias_para_sumar = (DIAS[dia_mencionado] - today.weekday()) % 7
        if dias_para_sumar == 0:  # Si es hoy, vamos a la próxima semana
            dias_para_sumar = 7
        return today + timedelta(days=dias_para_sumar)

    raise ValueError(f"No se pudo interpretar la fecha: '{date_expression}'")

def _resolve_day_of_month(dia: int, mes_str: str, anio_str: Optional[str], today: date) -> date:
    if mes_str not in MESES:
        raise ValueError(f"Mes desconocido: '{mes_str}'")
    mes = MESES[mes_str]

    if anio_str:
        anio = int(anio_str)
    else:
        # Si la fecha ya pasó este año, usamos el próximo año
        anio = today.year
        if mes < today.month or (mes == today.month and dia < today.day):
            anio += 1

    dias_en_mes = calendar.monthrange(anio, mes)[1]
    if not 1 <= dia <= dias_en_mes:
        raise ValueError(f"Día inválido para {MONTH_NAMES[mes]}: {dia}")
    return date(anio, mes, dia)
