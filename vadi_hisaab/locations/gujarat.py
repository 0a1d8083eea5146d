"""
Saurashtra districts of Gujarat: district -> taluka -> village.

Each entry is (key, label, children). Keys are the English names stored in
profiles; labels are Gujarati. Declaration order is the display order.
"""

GUJARAT_LOCATIONS = (
    ("Rajkot", "રાજકોટ", (
        ("Rajkot", "રાજકોટ", (
            ("Rajkot", "રાજકોટ"),
            ("Kothariya", "કોઠારિયા"),
            ("Mavdi", "માવડી"),
            ("Aji", "આજી"),
        )),
        ("Gondal", "ગોંડલ", (
            ("Gondal", "ગોંડલ"),
            ("Sardhar", "સરધાર"),
            ("Bedi", "બેડી"),
            ("Navagam", "નવાગામ"),
        )),
        ("Jasdan", "જસદણ", (
            ("Jasdan", "જસદણ"),
            ("Malia", "માળિયા"),
            ("Vinchhiya", "વિંછીયા"),
        )),
        ("Jetpur", "જેતપુર", (
            ("Jetpur", "જેતપુર"),
            ("Savar", "સાવર"),
            ("Bhanvad", "ભાણવડ"),
        )),
        ("Lodhika", "લોધિકા", (
            ("Lodhika", "લોધિકા"),
            ("Shapar", "શાપર"),
            ("Veraval", "વેરાવળ"),
        )),
        ("Paddhari", "પડધરી", (
            ("Paddhari", "પડધરી"),
            ("Virpur", "વીરપુર"),
        )),
        ("Dhoraji", "ધોરાજી", (
            ("Dhoraji", "ધોરાજી"),
            ("Upleta", "ઉપલેટા"),
        )),
    )),
    ("Jamnagar", "જામનગર", (
        ("Jamnagar", "જામનગર", (
            ("Jamnagar", "જામનગર"),
            ("Balachadi", "બાળાછડી"),
            ("Sikka", "સિક્કા"),
            ("Reldi", "રેળડી"),
        )),
        ("Kalavad", "કાળાવડ", (
            ("Kalavad", "કાળાવડ"),
            ("Khijadia", "ખીજડીયા"),
            ("Vadinar", "વાડીનાર"),
            ("Mota Bhandariya", "મોટા ભંડારિયા"),
            ("Pardi", "પારડી"),
            ("Asota", "અસોટા"),
        )),
        ("Dhrol", "ઢ્રોળ", (
            ("Dhrol", "ઢ્રોળ"),
            ("Joshipura", "જોષીપુરા"),
            ("Mota Mva", "મોટા મ્વા"),
        )),
        ("Lalpur", "લાલપુર", (
            ("Lalpur", "લાલપુર"),
            ("Shedub", "શેઢૂ"),
            ("Navagam Ghed", "નવાગામ ઘેડ"),
        )),
        ("Okha", "ઓખા", (
            ("Okha", "ઓખા"),
            ("Beyt", "બેટ"),
            ("Mithapur", "મિઠાપુર"),
        )),
        ("Jodiya", "જોડિયા", (
            ("Jodiya", "જોડિયા"),
            ("Salaya", "સાલાયા"),
        )),
    )),
    ("Junagadh", "જૂનાગઢ", (
        ("Junagadh", "જૂનાગઢ", (
            ("Junagadh", "જૂનાગઢ"),
            ("Bilkha", "બિળખા"),
            ("Sarki", "સારકી"),
        )),
        ("Keshod", "કેશોદ", (
            ("Keshod", "કેશોદ"),
            ("Navagadh", "નવાગઢ"),
            ("Chorvad", "ચોરવાડ"),
        )),
        ("Veraval", "વેરાવળ", (
            ("Veraval", "વેરાવળ"),
            ("Sutrapada", "સૂત્રાપાડા"),
            ("Prabhas Patan", "પ્રભાસ પાટણ"),
        )),
        ("Mangrol", "માંગરોળ", (
            ("Mangrol", "માંગરોળ"),
            ("Tulsishyam", "તુલસીશ્યામ"),
        )),
        ("Visavadar", "વિસાવદર", (
            ("Visavadar", "વિસાવદર"),
            ("Shiyal", "શિયાળ"),
        )),
    )),
    ("Amreli", "અમરેલી", (
        ("Amreli", "અમરેલી", (
            ("Amreli", "અમરેલી"),
            ("Khambha", "ખાંભા"),
            ("Dhari", "ધારી"),
        )),
        ("Rajula", "રાજુળા", (
            ("Rajula", "રાજુળા"),
            ("Pipaliya", "પિપળિયા"),
            ("Kukavav", "કૂકાવાવ"),
        )),
        ("Savarkundla", "સાવરકુંડલા", (
            ("Savarkundla", "સાવરકુંડલા"),
            ("Babra", "બાબરા"),
        )),
        ("Lathi", "લાઠી", (
            ("Lathi", "લાઠી"),
            ("Liliya", "લીલિયા"),
        )),
    )),
    ("Morbi", "મોરબી", (
        ("Morbi", "મોરબી", (
            ("Morbi", "મોરબી"),
            ("Tankara", "ટંકારા"),
            ("Navlakhi", "નવલખી"),
        )),
        ("Wankaner", "વાંકાનેર", (
            ("Wankaner", "વાંકાનેર"),
            ("Halvad", "હળવદ"),
            ("Muli", "મૂળી"),
        )),
        ("Maliya", "માળિયા", (
            ("Maliya Miyana", "માળિયા મિયાણા"),
            ("Zarpara", "ઝારપારા"),
        )),
    )),
    ("Bhavnagar", "ભાવનગર", (
        ("Bhavnagar", "ભાવનગર", (
            ("Bhavnagar", "ભાવનગર"),
            ("Ghogha", "ઘોઘા"),
            ("Vadodara", "વડોદરા"),
        )),
        ("Sihor", "સિહોર", (
            ("Sihor", "સિહોર"),
            ("Palitana", "પાળિતાણા"),
            ("Gariadhar", "ગારિયાધાર"),
        )),
        ("Mahuva", "મહુવા", (
            ("Mahuva", "મહુવા"),
            ("Talaja", "તળાજા"),
        )),
        ("Umrala", "ઉમરાળા", (
            ("Umrala", "ઉમરાળા"),
            ("Vallabhipur", "વલ્લભીપુર"),
        )),
    )),
    ("Surendranagar", "સુરેન્દ્રનગર", (
        ("Surendranagar", "સુરેન્દ્રનગર", (
            ("Surendranagar", "સુરેન્દ્રનગર"),
            ("Wadhwan", "વઢવાણ"),
            ("Rampara", "રામપરા"),
        )),
        ("Chotila", "ચોટીલા", (
            ("Chotila", "ચોટીલા"),
            ("Sayla", "સાયળા"),
            ("Thangadh", "થાંગઢ"),
        )),
        ("Dhrangadhra", "ધ્રાંગધ્રા", (
            ("Dhrangadhra", "ધ્રાંગધ્રા"),
            ("Limbdi", "લીંબડી"),
        )),
        ("Lakhtar", "લખતર", (
            ("Lakhtar", "લખતર"),
            ("Dasada", "દસાડા"),
        )),
    )),
    ("Other", "અન્ય", (
        ("Other", "અન્ય", (
            ("Other", "અન્ય"),
        )),
    )),
)
